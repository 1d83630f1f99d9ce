"""Book catalog: storage and routes."""

from .models import Book, BookForm
from .queries import BookQueries
from .routes import configure_catalog_router

__all__ = ["Book", "BookForm", "BookQueries", "configure_catalog_router"]
