"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层与 gRPC 传输层仅负责映射，领域层不反向依赖它们。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class BookNotFoundException(BusinessException):
    def __init__(self, book_id: Optional[str] = None):
        details = {"book_id": book_id} if book_id else None
        super().__init__(
            code=BusinessCode.BOOK_NOT_FOUND,
            message=f"Book with ID {book_id} not found",
            error_type="BookNotFound",
            details=details,
        )


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
        )
