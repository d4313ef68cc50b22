"""Domain entity representing a catalog book."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Book:
    """Catalog item. Price is expressed in the smallest currency unit."""

    id: str
    title: str
    price: int
    author: str
    description: str


# Loaded into every fresh store; state resets to this on process restart.
SEED_BOOKS: tuple[Book, ...] = (
    Book(
        id="1234",
        title="Harry Potter",
        price=120,
        author="JK Rowling",
        description="a lovely book",
    ),
    Book(
        id="4567",
        title="Game of life",
        price=450,
        author="Author Two",
        description="This is a test",
    ),
)
