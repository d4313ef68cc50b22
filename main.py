"""
FastAPI应用主入口 - Bookie HTTP 网关（BFF）
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from api.routes import books
from api.middleware import RequestIDMiddleware, LoggingMiddleware
from core.config import settings
from core.exceptions import register_exception_handlers
from core.response import render_response, success_response
from core.logging_config import get_logger, configure_logging
from infrastructure.external.bookie import BookieClient


# 初始化日志：在入口处显式配置
configure_logging(service="bookie-client")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    client: Optional[BookieClient] = getattr(app.state, "book_client", None)
    owns_client = client is None
    if owns_client:
        # 连接失败直接抛出，阻止进程以不可用的客户端启动
        client = BookieClient(
            target=settings.bookie_client.target,
            connect_timeout=settings.bookie_client.connect_timeout,
            timeout=settings.bookie_client.timeout,
        )
        await client.connect()
        app.state.book_client = client
    logger.info("application_started", bookie_target=client.target)

    yield

    if owns_client:
        try:
            await client.close()
        except Exception as exc:
            logger.error("bookie_close_failed", error=str(exc))
        app.state.book_client = None
    logger.info("application_shutdown", message="Application shutdown")


def create_app(book_client: Optional[BookieClient] = None) -> FastAPI:
    """
    创建 FastAPI 应用

    Args:
        book_client: 预先构造的客户端（测试注入）；为空时由 lifespan 负责连接与关闭
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        description="REST gateway for the Bookie gRPC service",
    )
    app.state.book_client = book_client

    # 注意顺序：后添加的中间件在外层，RequestID 需包住日志中间件
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(books.router)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """健康检查端点"""
        return render_response(success_response(data={"status": "healthy"}, message="OK"))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    # uvicorn 自行处理 SIGINT/SIGTERM；超过 shutdown_timeout 仍未结束的连接会被强制关闭
    uvicorn.run(
        app,
        host=settings.http.host,
        port=settings.http.port,
        log_config=None,
        timeout_graceful_shutdown=settings.http.shutdown_timeout,
    )
