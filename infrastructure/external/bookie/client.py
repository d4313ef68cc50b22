"""
Bookie gRPC 客户端

- 单连接：每个实例持有一个 grpc.aio 通道，由持有者负责关闭
- 快速失败：connect() 在超时内等不到通道就绪即抛出 BookieConnectionError
- 错误透传：RPC 失败（grpc.aio.AioRpcError）原样抛给调用方，由 HTTP 层统一翻译
"""
import asyncio
from typing import List, Optional, Sequence, Tuple

import grpc
import structlog

from application.dto import BookDTO
from core.logging_config import get_logger
from grpc_app.generated.bookie.v1 import bookie_pb2, bookie_pb2_grpc
from grpc_app.mappers.book import book_proto_to_dto


logger = get_logger(__name__)

REQUEST_ID_META_KEY = "x-request-id"
DEFAULT_PAGE_SIZE = 10


class BookieConnectionError(Exception):
    """无法建立到 Bookie RPC 服务的连接"""

    def __init__(self, target: str, message: str):
        self.target = target
        self.message = message
        super().__init__(f"{message} | Target: {target}")


class BookieClient:
    """Bookie RPC 服务的本地门面

    传输层未加密（insecure channel），仅适用于可信的本地部署。
    """

    def __init__(
        self,
        target: str,
        connect_timeout: float = 5.0,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            target: RPC 服务地址，如 localhost:8020
            connect_timeout: 等待通道就绪的秒数
            timeout: 单次调用的截止时间（秒），None 表示不设截止
        """
        self.target = target
        self.connect_timeout = connect_timeout
        self.timeout = timeout
        self._channel: Optional[grpc.aio.Channel] = None
        self._stub: Optional[bookie_pb2_grpc.BookieStub] = None

    @property
    def connected(self) -> bool:
        return self._channel is not None

    async def connect(self) -> "BookieClient":
        """打开通道并等待就绪"""
        if self._channel is not None:
            return self
        channel = grpc.aio.insecure_channel(self.target)
        try:
            await asyncio.wait_for(channel.channel_ready(), timeout=self.connect_timeout)
        except asyncio.TimeoutError as exc:
            await channel.close()
            logger.error("bookie_connect_failed", target=self.target, timeout=self.connect_timeout)
            raise BookieConnectionError(self.target, "Could not connect to Bookie service") from exc
        self._channel = channel
        self._stub = bookie_pb2_grpc.BookieStub(channel)
        logger.info("bookie_connected", target=self.target)
        return self

    async def close(self) -> None:
        """关闭通道（可重复调用）"""
        if self._channel is not None:
            channel, self._channel, self._stub = self._channel, None, None
            await channel.close()
            logger.info("bookie_disconnected", target=self.target)

    async def __aenter__(self):
        return await self.connect()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def stub(self) -> bookie_pb2_grpc.BookieStub:
        if self._stub is None:
            raise BookieConnectionError(self.target, "Client is not connected")
        return self._stub

    def _metadata(self) -> Sequence[Tuple[str, str]]:
        # RequestIDMiddleware binds request_id into structlog contextvars
        request_id = structlog.contextvars.get_contextvars().get("request_id")
        return ((REQUEST_ID_META_KEY, request_id),) if request_id else ()

    async def get_books(self) -> Optional[List[BookDTO]]:
        """获取全部图书；没有图书时返回 None（网关渲染为 data: null）"""
        res = await self.stub.ListBooks(
            bookie_pb2.ListBookRequest(page_size=DEFAULT_PAGE_SIZE),
            timeout=self.timeout,
            metadata=self._metadata(),
        )
        if not res.books:
            return None
        return [book_proto_to_dto(b) for b in res.books]

    async def get_by_id(self, book_id: str) -> BookDTO:
        """按ID获取图书；NOT_FOUND / INVALID_ARGUMENT 等失败原样抛出"""
        res = await self.stub.GetByID(
            bookie_pb2.GetByIDRequest(id=book_id),
            timeout=self.timeout,
            metadata=self._metadata(),
        )
        return book_proto_to_dto(res.book)

