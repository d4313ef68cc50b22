"""HTTP gateway -> BookieClient -> real gRPC server, all in-process."""
import httpx
import pytest

from core.config import settings
from infrastructure.external.bookie import BookieConnectionError
from main import create_app


pytestmark = pytest.mark.asyncio


async def test_round_trip_preserves_every_field(book_client):
    app = create_app(book_client=book_client)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        listed = await http.get("/books")
        one = await http.get("/books/4567")
        missing = await http.get("/books/nope")

    assert listed.status_code == 200
    assert [b["id"] for b in listed.json()["data"]] == ["1234", "4567"]
    assert one.json()["data"] == [{
        "id": "4567",
        "title": "Game of life",
        "price": 450,
        "author": "Author Two",
        "description": "This is a test",
    }]
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Item not found", "data": None}


@pytest.mark.parametrize("repository", [[]], indirect=True)
async def test_empty_store_lists_null_data(book_client):
    app = create_app(book_client=book_client)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        resp = await http.get("/books")
    assert resp.status_code == 200
    assert resp.json()["data"] is None


async def test_large_price_survives_round_trip(grpc_server, book_client):
    from grpc_app.generated.bookie.v1 import bookie_pb2, bookie_pb2_grpc
    import grpc

    target, _ = grpc_server
    async with grpc.aio.insecure_channel(target) as channel:
        created = await bookie_pb2_grpc.BookieStub(channel).CreateBook(
            bookie_pb2.CreateBookRequest(title="Big", price=2**53 + 1, author="A", description="D")
        )

    app = create_app(book_client=book_client)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        resp = await http.get(f"/books/{created.book.id}")
    assert resp.json()["data"][0]["price"] == 2**53 + 1


async def test_lifespan_connects_and_closes(grpc_server, monkeypatch):
    target, _ = grpc_server
    monkeypatch.setattr(settings.bookie_client, "target", target)
    app = create_app()
    async with app.router.lifespan_context(app):
        client = app.state.book_client
        assert client.connected
        assert [b.id for b in await client.get_books()] == ["1234", "4567"]
    assert not client.connected
    assert app.state.book_client is None


async def test_lifespan_fails_fast_without_rpc_service(monkeypatch):
    monkeypatch.setattr(settings.bookie_client, "target", "127.0.0.1:1")
    monkeypatch.setattr(settings.bookie_client, "connect_timeout", 0.5)
    app = create_app()
    with pytest.raises(BookieConnectionError):
        async with app.router.lifespan_context(app):
            pass
