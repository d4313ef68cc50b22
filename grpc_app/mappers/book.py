from __future__ import annotations

from application.dto import BookCreateDTO, BookDTO
from grpc_app.generated.bookie.v1 import bookie_pb2


def book_dto_to_proto(dto: BookDTO) -> bookie_pb2.Book:
    return bookie_pb2.Book(
        id=dto.id,
        title=dto.title,
        price=int(dto.price),
        author=dto.author,
        description=dto.description,
    )


def book_proto_to_dto(msg: bookie_pb2.Book) -> BookDTO:
    # int64 on the wire; Python ints hold any value it can carry
    return BookDTO(
        id=msg.id,
        title=msg.title,
        price=int(msg.price),
        author=msg.author,
        description=msg.description,
    )


def create_request_to_dto(request: bookie_pb2.CreateBookRequest) -> BookCreateDTO:
    return BookCreateDTO(
        title=request.title,
        price=int(request.price),
        author=request.author,
        description=request.description,
    )
