import asyncio
import signal

import grpc

from core.config import settings
from core.logging_config import configure_logging, get_logger
from grpc_app.server import create_server


configure_logging(service="bookie-grpc")
logger = get_logger(__name__)

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


async def serve(server: grpc.aio.Server, address: str, grace: float) -> None:
    """Start `server` and block until SIGINT/SIGTERM, then stop it gracefully."""
    stop = asyncio.Event()
    received: list[signal.Signals] = []
    loop = asyncio.get_running_loop()

    def _on_signal(sig: signal.Signals) -> None:
        received.append(sig)
        stop.set()

    # Register before serving so an early signal is never lost
    for sig in STOP_SIGNALS:
        loop.add_signal_handler(sig, _on_signal, sig)

    try:
        logger.info("grpc_starting", address=address)
        await server.start()
        logger.info("grpc_started", address=address)

        serve_task = asyncio.create_task(server.wait_for_termination())
        stop_task = asyncio.create_task(stop.wait())
        done, _ = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

        if stop_task in done:
            logger.info("grpc_stopping", signal=received[0].name, grace=grace)
            # New calls are rejected immediately; in-flight calls get up to `grace` seconds
            await server.stop(grace=grace)
            await serve_task
            logger.info("grpc_stopped")
        else:
            stop_task.cancel()
            logger.error("grpc_terminated_unexpectedly", address=address)
    finally:
        for sig in STOP_SIGNALS:
            loop.remove_signal_handler(sig)


async def main() -> None:
    try:
        server, port = await create_server()
    except RuntimeError as exc:
        logger.error("grpc_bind_failed", address=settings.grpc_address, error=str(exc))
        raise
    await serve(server, f"{settings.grpc.host}:{port}", settings.grpc.shutdown_grace)


if __name__ == "__main__":
    asyncio.run(main())
