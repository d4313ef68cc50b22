"""
图书仓储接口 - 定义数据访问的抽象接口
"""
from abc import ABC, abstractmethod
from typing import List
from .entity import Book


class BookRepository(ABC):
    """图书仓储抽象接口 - 只定义能做什么，不管怎么做"""

    @abstractmethod
    async def list(self) -> List[Book]:
        """按插入顺序返回全部图书"""
        pass

    @abstractmethod
    async def find_by_id(self, book_id: str) -> Book:
        """根据ID获取图书，不存在时抛出 BookNotFoundException"""
        pass

    @abstractmethod
    async def append(self, book: Book) -> Book:
        """追加图书到末尾"""
        pass
