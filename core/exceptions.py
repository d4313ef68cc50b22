"""
gRPC 错误到 HTTP 的映射与全局异常处理器
"""
from typing import Tuple

import grpc
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette import status as http_status

from .response import error_response, render_response
from core.logging_config import get_logger
from infrastructure.external.bookie import BookieConnectionError


NOT_FOUND_MESSAGE = "Item not found"
GENERIC_ERROR_MESSAGE = "Something went wrong"


def grpc_error_to_http_status(exc: Exception) -> Tuple[int, str]:
    """
    将 gRPC 错误映射为 HTTP 状态码与提示信息

    NOT_FOUND -> 404 "Item not found"，其他一律 500 "Something went wrong"
    """
    if isinstance(exc, grpc.aio.AioRpcError) and exc.code() == grpc.StatusCode.NOT_FOUND:
        return http_status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE
    return http_status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE


def register_exception_handlers(app: FastAPI):
    """
    注册全局异常处理器

    Args:
        app: FastAPI应用实例
    """

    logger = get_logger(__name__)

    @app.exception_handler(grpc.aio.AioRpcError)
    async def grpc_error_handler(request: Request, exc: grpc.aio.AioRpcError):
        """RPC 失败：唯一的一次翻译"""
        status_code, message = grpc_error_to_http_status(exc)
        log = logger.warning if status_code < 500 else logger.error
        log(
            "grpc_call_failed",
            grpc_status=exc.code().name,
            grpc_details=exc.details(),
            status_code=status_code,
        )
        return render_response(error_response(message), status_code)

    @app.exception_handler(BookieConnectionError)
    async def connection_error_handler(request: Request, exc: BookieConnectionError):
        """RPC 客户端不可用"""
        logger.error("bookie_unavailable", target=exc.target, error=exc.message)
        return render_response(
            error_response(GENERIC_ERROR_MESSAGE),
            http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """处理HTTP异常（未知路由、方法不允许等），保持统一信封"""
        response = render_response(error_response(str(exc.detail)), exc.status_code)
        for key, value in (getattr(exc, "headers", None) or {}).items():
            response.headers[key] = value
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """处理所有未捕获的异常"""
        logger.error(
            "unhandled_exception",
            error=str(exc),
            exc_info=True,
        )
        return render_response(
            error_response(GENERIC_ERROR_MESSAGE),
            http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
