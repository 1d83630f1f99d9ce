"""Document persistence for accounts, books and orders."""

from .documents import (
    Document,
    DocumentStore,
    StoreError,
    UpdateResult,
    new_id,
    utc_now,
)

__all__ = [
    "Document",
    "DocumentStore",
    "StoreError",
    "UpdateResult",
    "new_id",
    "utc_now",
]
