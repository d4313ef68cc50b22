import asyncio

import pytest

from domain.book.entity import Book, SEED_BOOKS
from domain.common.exceptions import BookNotFoundException
from infrastructure.repositories.book_repository import InMemoryBookRepository


async def test_list_returns_seed_books_in_insertion_order():
    repo = InMemoryBookRepository()
    books = await repo.list()
    assert [b.id for b in books] == ["1234", "4567"]
    assert books[0].title == "Harry Potter"
    assert books[1].title == "Game of life"


async def test_list_empty_store_returns_empty_list():
    repo = InMemoryBookRepository([])
    assert await repo.list() == []


async def test_list_returns_copy():
    repo = InMemoryBookRepository()
    books = await repo.list()
    books.clear()
    assert len(await repo.list()) == 2


async def test_find_by_id_returns_exact_record():
    repo = InMemoryBookRepository()
    for seeded in SEED_BOOKS:
        assert await repo.find_by_id(seeded.id) == seeded


@pytest.mark.parametrize("book_id", ["", "nope", "12345"])
async def test_find_by_id_missing_raises_not_found(book_id):
    repo = InMemoryBookRepository()
    with pytest.raises(BookNotFoundException):
        await repo.find_by_id(book_id)


async def test_find_by_id_first_match_wins():
    first = Book(id="dup", title="first", price=1, author="a", description="d")
    second = Book(id="dup", title="second", price=2, author="b", description="e")
    repo = InMemoryBookRepository([first, second])
    assert (await repo.find_by_id("dup")).title == "first"


async def test_append_adds_to_end_without_collision_check():
    repo = InMemoryBookRepository()
    dup = Book(id="1234", title="Again", price=1, author="x", description="y")
    await repo.append(dup)
    books = await repo.list()
    assert len(books) == 3
    assert books[-1] is dup


async def test_concurrent_appends_are_all_kept():
    repo = InMemoryBookRepository([])
    books = [Book(id=str(i), title=f"t{i}", price=i, author="a", description="d") for i in range(50)]
    await asyncio.gather(*(repo.append(b) for b in books))
    assert sorted(b.id for b in await repo.list()) == sorted(b.id for b in books)
