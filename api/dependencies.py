"""
API依赖项
"""
from fastapi import Request

from infrastructure.external.bookie import BookieClient, BookieConnectionError


async def get_book_client(request: Request) -> BookieClient:
    """获取应用生命周期内共享的 BookieClient"""
    client = getattr(request.app.state, "book_client", None)
    if client is None:
        raise BookieConnectionError("<unset>", "Bookie client is not initialized")
    return client
