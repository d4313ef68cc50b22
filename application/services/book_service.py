"""
图书应用服务（application/services）- 编排图书仓储并处理应用逻辑
"""
import uuid
from typing import Callable, List, Optional

from domain.book.entity import Book
from domain.book.repository import BookRepository
from domain.common.exceptions import DomainValidationException
from application.dto import BookCreateDTO, BookDTO
from core.logging_config import get_logger


logger = get_logger(__name__)


def new_book_id() -> str:
    """默认ID策略：随机 UUID4 字符串，不与种子ID冲突"""
    return str(uuid.uuid4())


class BookApplicationService:
    """图书应用服务 - 处理应用层逻辑"""

    def __init__(
        self,
        repository: BookRepository,
        id_factory: Callable[[], str] = new_book_id,
    ):
        self._repository = repository
        self._id_factory = id_factory

    async def list_books(self, page_size: Optional[int] = None) -> List[BookDTO]:
        """列出全部图书；page_size 仅作记录，不做分页"""
        books = await self._repository.list()
        logger.debug("books_listed", count=len(books), page_size=page_size)
        return [self._to_dto(b) for b in books]

    async def get_book(self, book_id: str) -> BookDTO:
        if not book_id:
            raise DomainValidationException("Please provide id", field="id")
        book = await self._repository.find_by_id(book_id)
        return self._to_dto(book)

    async def create_book(self, data: BookCreateDTO) -> BookDTO:
        book = Book(
            id=self._id_factory(),
            title=data.title,
            price=data.price,
            author=data.author,
            description=data.description,
        )
        await self._repository.append(book)
        logger.info("book_created", book_id=book.id, title=book.title)
        return self._to_dto(book)

    @staticmethod
    def _to_dto(book: Book) -> BookDTO:
        return BookDTO.model_validate(book)
