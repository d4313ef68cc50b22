"""Book domain exports."""
from .entity import Book, SEED_BOOKS
from .repository import BookRepository

__all__ = ["Book", "BookRepository", "SEED_BOOKS"]
