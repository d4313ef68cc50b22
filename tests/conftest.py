"""Pytest bootstrap configuration.

Shared fixtures: an in-process Bookie gRPC server on an ephemeral port
(insecure, 127.0.0.1:0) and a connected BookieClient pointing at it.
"""
import os
from typing import AsyncIterator, Tuple

import pytest

# Keep test logs compact and deterministic
os.environ.setdefault("DEBUG", "false")

from domain.book.entity import SEED_BOOKS  # noqa: E402
from infrastructure.repositories.book_repository import InMemoryBookRepository  # noqa: E402


@pytest.fixture
def repository(request) -> InMemoryBookRepository:
    """Seeded store; parametrize indirectly with a list of books to override."""
    return InMemoryBookRepository(getattr(request, "param", SEED_BOOKS))


@pytest.fixture
async def grpc_server(repository) -> AsyncIterator[Tuple[str, object]]:
    """Start the real Bookie server (interceptors included) backed by `repository`."""
    from grpc_app.server import create_server

    server, port = await create_server(repository, address="127.0.0.1:0")
    await server.start()
    try:
        yield f"127.0.0.1:{port}", server
    finally:
        await server.stop(grace=None)


@pytest.fixture
async def book_client(grpc_server):
    from infrastructure.external.bookie import BookieClient

    target, _ = grpc_server
    async with BookieClient(target, connect_timeout=5.0) as client:
        yield client
