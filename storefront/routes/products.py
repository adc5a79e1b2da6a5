# storefront/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.schemas.product import ProductOut
from storefront.storage import Storage, get_storage

router = APIRouter(prefix="/products", tags=["Products"])


# List the catalog, optionally narrowed to one category (exact match)
@router.get("", response_model=List[ProductOut])
def list_products(
    category: Optional[str] = Query(None, description="Filter by category"),
    storage: Storage = Depends(get_storage),
):
    if category:
        return storage.list_products_by_category(category)
    return storage.list_products()


# Retrieve unique product categories
@router.get("/categories", response_model=List[str])
def list_categories(storage: Storage = Depends(get_storage)):
    return storage.list_categories()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, storage: Storage = Depends(get_storage)):
    product = storage.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
