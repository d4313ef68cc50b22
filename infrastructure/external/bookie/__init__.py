"""
Bookie gRPC 客户端模块

为 HTTP 网关提供访问 Bookie RPC 服务的类型化门面
"""
from .client import BookieClient, BookieConnectionError

__all__ = [
    "BookieClient",
    "BookieConnectionError",
]
