from __future__ import annotations

from typing import Optional, Sequence
import grpc
from grpc_health.v1 import health, health_pb2_grpc, health_pb2

from core.config import settings
from core.logging_config import get_logger
from application.services.book_service import BookApplicationService
from domain.book.repository import BookRepository
from infrastructure.repositories.book_repository import InMemoryBookRepository
from grpc_app.interceptors.request_id import RequestIdInterceptor
from grpc_app.interceptors.logging import LoggingInterceptor
from grpc_app.interceptors.exceptions import ExceptionMappingInterceptor
from grpc_app.generated.bookie.v1 import bookie_pb2, bookie_pb2_grpc
from grpc_app.services.bookie_service import BookieService


logger = get_logger(__name__)

BOOKIE_SERVICE_NAME = bookie_pb2.DESCRIPTOR.services_by_name["Bookie"].full_name


def _server_credentials() -> grpc.ServerCredentials:
    tls = settings.grpc.tls
    if not (tls.cert and tls.key):
        raise RuntimeError("GRPC TLS enabled but cert/key not provided")
    with open(tls.cert, "rb") as f:
        cert_chain = f.read()
    with open(tls.key, "rb") as f:
        private_key = f.read()
    root_certificates = None
    if tls.ca:
        with open(tls.ca, "rb") as f:
            root_certificates = f.read()
    return grpc.ssl_server_credentials(
        [(private_key, cert_chain)],
        root_certificates=root_certificates,
        require_client_auth=bool(root_certificates),
    )


async def create_server(
    repository: Optional[BookRepository] = None,
    address: Optional[str] = None,
) -> tuple[grpc.aio.Server, int]:
    """Build the Bookie gRPC server and bind it.

    Each server owns its own book store; a fresh InMemoryBookRepository with
    the seed books is created unless one is supplied. Returns the server and
    the bound port (useful when binding to port 0).
    """
    interceptors: Sequence[grpc.aio.ServerInterceptor] = (
        RequestIdInterceptor(),
        LoggingInterceptor(),
        ExceptionMappingInterceptor(),  # maps business exceptions
    )

    options = [
        ("grpc.max_concurrent_streams", max(1, settings.grpc.max_concurrent_streams)),
    ]
    server = grpc.aio.server(interceptors=interceptors, options=options)

    # Register services
    store = repository if repository is not None else InMemoryBookRepository()
    bookie_pb2_grpc.add_BookieServicer_to_server(BookieService(BookApplicationService(store)), server)

    # Health service
    health_svc = health.aio.HealthServicer()
    health_pb2_grpc.add_HealthServicer_to_server(health_svc, server)
    await health_svc.set("", health_pb2.HealthCheckResponse.SERVING)
    await health_svc.set(BOOKIE_SERVICE_NAME, health_pb2.HealthCheckResponse.SERVING)

    address = address or settings.grpc_address
    if settings.grpc.tls.enabled:
        port = server.add_secure_port(address, _server_credentials())
    else:
        port = server.add_insecure_port(address)

    return server, port
