import grpc
import pytest

from application.dto import BookDTO
from infrastructure.external.bookie import BookieClient, BookieConnectionError


pytestmark = pytest.mark.asyncio


async def test_get_books_maps_wire_records(book_client):
    books = await book_client.get_books()
    assert books == [
        BookDTO(id="1234", title="Harry Potter", price=120, author="JK Rowling", description="a lovely book"),
        BookDTO(id="4567", title="Game of life", price=450, author="Author Two", description="This is a test"),
    ]
    assert all(isinstance(b.price, int) for b in books)


@pytest.mark.parametrize("repository", [[]], indirect=True)
async def test_get_books_empty_is_none(book_client):
    assert await book_client.get_books() is None


async def test_get_by_id(book_client):
    book = await book_client.get_by_id("1234")
    assert book.title == "Harry Potter"


async def test_get_by_id_propagates_rpc_error(book_client):
    with pytest.raises(grpc.aio.AioRpcError) as ei:
        await book_client.get_by_id("nope")
    assert ei.value.code() == grpc.StatusCode.NOT_FOUND


async def test_connect_fails_fast_when_server_is_down():
    # Port 1 is privileged and never serves gRPC here
    client = BookieClient("127.0.0.1:1", connect_timeout=0.5)
    with pytest.raises(BookieConnectionError):
        await client.connect()
    assert not client.connected


async def test_close_is_idempotent(grpc_server):
    target, _ = grpc_server
    client = BookieClient(target)
    await client.connect()
    assert client.connected
    await client.close()
    await client.close()
    assert not client.connected


async def test_calls_before_connect_raise_connection_error():
    client = BookieClient("127.0.0.1:1")
    with pytest.raises(BookieConnectionError):
        await client.get_books()
