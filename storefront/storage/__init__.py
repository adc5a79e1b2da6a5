# storefront/storage/__init__.py
from typing import Iterator

from fastapi import Request

from storefront.storage.base import Storage
from storefront.storage.memory import MemoryStorage
from storefront.storage.sql import SqlStorage

__all__ = ["Storage", "MemoryStorage", "SqlStorage", "get_storage"]


# Request-scoped repository: the shared in-memory store, or a SQL store
# bound to a fresh session that is closed once the response is sent
def get_storage(request: Request) -> Iterator[Storage]:
    memory = getattr(request.app.state, "memory_storage", None)
    if memory is not None:
        yield memory
        return

    db = request.app.state.session_factory()
    try:
        yield SqlStorage(db)
    finally:
        db.close()
