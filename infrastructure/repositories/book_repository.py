"""
图书仓储实现 - 进程内内存存储
"""
import asyncio
from typing import Iterable, List, Optional

from domain.book.entity import Book, SEED_BOOKS
from domain.book.repository import BookRepository
from domain.common.exceptions import BookNotFoundException
from core.logging_config import get_logger


logger = get_logger(__name__)


class InMemoryBookRepository(BookRepository):
    """图书仓储的内存实现

    由单个 RPC 服务实例持有；所有读写都在同一把锁内完成，
    进程重启后恢复为种子数据。
    """

    def __init__(self, books: Optional[Iterable[Book]] = None):
        self._books: List[Book] = list(SEED_BOOKS if books is None else books)
        self._lock = asyncio.Lock()

    async def list(self) -> List[Book]:
        async with self._lock:
            return list(self._books)

    async def find_by_id(self, book_id: str) -> Book:
        if not book_id:
            raise BookNotFoundException(book_id)
        async with self._lock:
            for book in self._books:
                if book.id == book_id:
                    return book
        raise BookNotFoundException(book_id)

    async def append(self, book: Book) -> Book:
        async with self._lock:
            self._books.append(book)
            size = len(self._books)
        logger.debug("book_appended", book_id=book.id, size=size)
        return book
