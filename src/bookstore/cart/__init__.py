"""Carts and favourites: per-account lists of book references."""

from .reference_list import (
    NotInListError,
    ReferenceList,
    cart_store,
    favourites_store,
)
from .routes import configure_cart_router

__all__ = [
    "NotInListError",
    "ReferenceList",
    "cart_store",
    "configure_cart_router",
    "favourites_store",
]
