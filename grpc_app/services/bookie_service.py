from __future__ import annotations

import grpc

from application.services.book_service import BookApplicationService
from grpc_app.generated.bookie.v1 import bookie_pb2, bookie_pb2_grpc
from grpc_app.mappers.book import book_dto_to_proto, create_request_to_dto


class BookieService(bookie_pb2_grpc.BookieServicer):
    """Thin adapter from bookie.v1.Bookie RPCs to BookApplicationService.

    Business exceptions (empty id, unknown id) propagate to
    ExceptionMappingInterceptor, which turns them into INVALID_ARGUMENT /
    NOT_FOUND.
    """

    def __init__(self, svc: BookApplicationService) -> None:
        self._svc = svc

    async def ListBooks(self, request: bookie_pb2.ListBookRequest, context: grpc.aio.ServicerContext) -> bookie_pb2.ListBooksResponse:  # type: ignore[override]
        books = await self._svc.list_books(page_size=request.page_size or None)
        return bookie_pb2.ListBooksResponse(books=[book_dto_to_proto(b) for b in books])

    async def GetByID(self, request: bookie_pb2.GetByIDRequest, context: grpc.aio.ServicerContext) -> bookie_pb2.GetByIDResponse:  # type: ignore[override]
        book = await self._svc.get_book(request.id)
        return bookie_pb2.GetByIDResponse(book=book_dto_to_proto(book))

    async def CreateBook(self, request: bookie_pb2.CreateBookRequest, context: grpc.aio.ServicerContext) -> bookie_pb2.CreateBookResponse:  # type: ignore[override]
        book = await self._svc.create_book(create_request_to_dto(request))
        return bookie_pb2.CreateBookResponse(book=book_dto_to_proto(book))
