# storefront/seed.py
import logging
from decimal import Decimal

from storefront.schemas.product import ProductCreate
from storefront.storage import Storage

logger = logging.getLogger(__name__)

_MATTRESS_IMAGE = "https://images.unsplash.com/photo-1555041469-a586c61ea9bc?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600"
_PILLOW_IMAGE = "https://images.unsplash.com/photo-1584434128309-6d96d6818202?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600"
_BEDROOM_IMAGE = "https://images.unsplash.com/photo-1586023492125-27b2c045efd7?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600"
_LAMP_IMAGE = "https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=600"

# Starter catalog loaded into an empty store
SAMPLE_PRODUCTS = [
    ProductCreate(
        name="Memory Foam Mattress", price=Decimal("12999"), category="mattress", rating=4.5,
        image=_BEDROOM_IMAGE,
        description="Premium memory foam mattress with cooling gel technology and 10-year warranty.",
    ),
    ProductCreate(
        name="Orthopedic Pillow", price=Decimal("1899"), category="pillow", rating=4.2,
        image=_PILLOW_IMAGE,
        description="Ergonomic orthopedic pillow designed for neck and spine support with breathable fabric.",
    ),
    ProductCreate(
        name="Luxury Spring Mattress", price=Decimal("18999"), category="mattress", rating=4.7,
        image=_MATTRESS_IMAGE,
        description="High-quality spring mattress with premium comfort layers and motion isolation.",
    ),
    ProductCreate(
        name="Wooden Bed Frame", price=Decimal("8999"), category="home", rating=4.3,
        image=_BEDROOM_IMAGE,
        description="Solid wood bed frame with modern design and sturdy construction.",
    ),
    ProductCreate(
        name="Bamboo Pillow Set", price=Decimal("2999"), category="pillow", rating=4.6,
        image=_PILLOW_IMAGE,
        description="Set of 2 bamboo fiber pillows with hypoallergenic and antimicrobial properties.",
    ),
    ProductCreate(
        name="Ceramic Table Lamp", price=Decimal("1599"), category="home", rating=4.4,
        image=_LAMP_IMAGE,
        description="Beautiful ceramic table lamp with adjustable brightness and modern design.",
    ),
    ProductCreate(
        name="Coir Mattress", price=Decimal("7999"), category="mattress", rating=4.8,
        image=_MATTRESS_IMAGE,
        description="Natural coir mattress with excellent ventilation and firm support.",
    ),
    ProductCreate(
        name="Silk Pillowcase Set", price=Decimal("1299"), category="pillow", rating=4.5,
        image=_PILLOW_IMAGE,
        description="Premium silk pillowcase set that's gentle on hair and skin.",
    ),
]


def seed_catalog(storage: Storage) -> int:
    added = storage.seed_products(SAMPLE_PRODUCTS)
    if added:
        logger.info("Seeded catalog with %s products", added)
    return added
