"""RPC process lifecycle: SIGTERM triggers a graceful stop of the running server."""
import asyncio
import os
import signal

import grpc
import pytest

import grpc_main
from core.config import settings
from domain.book.entity import SEED_BOOKS
from grpc_app.generated.bookie.v1 import bookie_pb2, bookie_pb2_grpc
from grpc_app.server import create_server
from infrastructure.repositories.book_repository import InMemoryBookRepository


pytestmark = pytest.mark.asyncio


class SlowBookRepository(InMemoryBookRepository):
    """Holds every `list` call for `delay` seconds so it is still running at shutdown."""

    def __init__(self, delay: float):
        super().__init__(SEED_BOOKS)
        self.delay = delay
        self.entered = asyncio.Event()

    async def list(self):
        self.entered.set()
        await asyncio.sleep(self.delay)
        return await super().list()


async def _wait_ready(target: str) -> None:
    async with grpc.aio.insecure_channel(target) as channel:
        await asyncio.wait_for(channel.channel_ready(), timeout=5.0)


async def _stop_task(task: asyncio.Task) -> None:
    if not task.done():
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)


async def test_main_stops_on_sigterm(monkeypatch):
    monkeypatch.setattr(settings, "PORT", None)
    monkeypatch.setattr(settings.grpc, "host", "127.0.0.1")
    monkeypatch.setattr(settings.grpc, "port", 0)
    monkeypatch.setattr(settings.grpc, "shutdown_grace", 1.0)

    ports = []

    async def recording_create_server(*args, **kwargs):
        server, port = await create_server(*args, **kwargs)
        ports.append(port)
        return server, port

    monkeypatch.setattr(grpc_main, "create_server", recording_create_server)

    task = asyncio.create_task(grpc_main.main())
    try:
        while not ports:
            assert not task.done(), task.exception()
            await asyncio.sleep(0.01)
        target = f"127.0.0.1:{ports[0]}"
        await _wait_ready(target)

        os.kill(os.getpid(), signal.SIGTERM)
        await asyncio.wait_for(task, timeout=10.0)
    finally:
        await _stop_task(task)

    assert task.exception() is None
    # The server is gone and the process handler was handed back
    async with grpc.aio.insecure_channel(target) as channel:
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(channel.channel_ready(), timeout=0.5)
    assert signal.getsignal(signal.SIGTERM) == signal.SIG_DFL


async def test_in_flight_call_completes_within_grace():
    repository = SlowBookRepository(delay=0.5)
    server, port = await create_server(repository, address="127.0.0.1:0")
    target = f"127.0.0.1:{port}"

    task = asyncio.create_task(grpc_main.serve(server, target, grace=5.0))
    try:
        await _wait_ready(target)
        async with grpc.aio.insecure_channel(target) as channel:
            call = asyncio.ensure_future(
                bookie_pb2_grpc.BookieStub(channel).ListBooks(bookie_pb2.ListBookRequest(page_size=10))
            )
            await asyncio.wait_for(repository.entered.wait(), timeout=5.0)

            os.kill(os.getpid(), signal.SIGTERM)
            res = await asyncio.wait_for(call, timeout=10.0)

        await asyncio.wait_for(task, timeout=10.0)
    finally:
        await _stop_task(task)

    assert [b.id for b in res.books] == ["1234", "4567"]
    assert task.exception() is None
