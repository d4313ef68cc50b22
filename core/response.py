"""
统一响应格式定义
"""
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError
from starlette import status as http_status
from starlette.responses import PlainTextResponse, Response as HTTPResponse

from core.logging_config import get_logger


T = TypeVar("T")

logger = get_logger(__name__)


class Response(BaseModel, Generic[T]):
    """统一响应模型：{success, message, data}"""
    success: bool
    message: str
    data: Optional[T] = None


def success_response(data: Any = None, message: str = "Success") -> Response:
    """
    创建成功响应

    Args:
        data: 返回数据
        message: 成功消息

    Returns:
        Response: 统一响应对象
    """
    return Response(success=True, message=message, data=data)


def error_response(message: str) -> Response:
    """创建错误响应（data 固定为 null）"""
    return Response(success=False, message=message, data=None)


def render_response(response: Response, status_code: int = http_status.HTTP_200_OK) -> HTTPResponse:
    """
    将统一响应序列化为 JSON

    序列化失败时不再返回信封，而是纯文本 500 "Internal Server Error"。
    """
    try:
        body = response.model_dump_json()
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        logger.error("response_serialization_failed", error=str(exc))
        return PlainTextResponse(
            "Internal Server Error",
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return HTTPResponse(content=body, status_code=status_code, media_type="application/json")
