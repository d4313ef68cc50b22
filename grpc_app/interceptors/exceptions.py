from __future__ import annotations

from typing import Callable, Awaitable
import contextvars

import grpc

from core.logging_config import get_logger
from domain.common.exceptions import BusinessException
from grpc_app.interceptors.request_id import REQUEST_ID_META_KEY, get_request_id
from shared.codes import BusinessCode


logger = get_logger(__name__)

# Mark that the current request has been mapped to a gRPC status
_mapped_error: contextvars.ContextVar[bool] = contextvars.ContextVar("grpc_mapped_error", default=False)


def set_mapped_error() -> None:
    _mapped_error.set(True)


def is_mapped_error() -> bool:
    return bool(_mapped_error.get())


_STATUS_BY_CODE = {
    BusinessCode.PARAM_ERROR: grpc.StatusCode.INVALID_ARGUMENT,
    BusinessCode.PARAM_MISSING: grpc.StatusCode.INVALID_ARGUMENT,
    BusinessCode.PARAM_VALIDATION_ERROR: grpc.StatusCode.INVALID_ARGUMENT,

    BusinessCode.NOT_FOUND: grpc.StatusCode.NOT_FOUND,
    BusinessCode.BOOK_NOT_FOUND: grpc.StatusCode.NOT_FOUND,

    BusinessCode.SERVICE_UNAVAILABLE: grpc.StatusCode.UNAVAILABLE,
    BusinessCode.NETWORK_ERROR: grpc.StatusCode.UNAVAILABLE,
    BusinessCode.SYSTEM_ERROR: grpc.StatusCode.INTERNAL,
}


def business_code_to_grpc_status(code: int) -> grpc.StatusCode:
    try:
        bc = BusinessCode(code)
    except ValueError:
        return grpc.StatusCode.FAILED_PRECONDITION
    return _STATUS_BY_CODE.get(bc, grpc.StatusCode.FAILED_PRECONDITION)


def _set_error_metadata(context: grpc.aio.ServicerContext, code: int, error_type: str) -> None:
    # Replaces the trailing metadata set earlier in the chain, so carry the request id along
    context.set_trailing_metadata((
        (REQUEST_ID_META_KEY, get_request_id() or ""),
        ("x-biz-code", str(int(code))),
        ("x-error-type", error_type),
    ))


class ExceptionMappingInterceptor(grpc.aio.ServerInterceptor):
    """Translate business exceptions raised by servicers into gRPC status codes.

    The business code and error type travel back as trailing metadata
    (`x-biz-code`, `x-error-type`); anything that is not a BusinessException
    becomes INTERNAL without leaking its message.
    """

    async def intercept_service(
        self,
        continuation: Callable[[grpc.HandlerCallDetails], Awaitable[grpc.RpcMethodHandler]],
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler:
        handler = await continuation(handler_call_details)
        if handler is None or not handler.unary_unary:
            return handler

        method = handler_call_details.method

        async def _unary_unary(request, context: grpc.aio.ServicerContext):
            try:
                return await handler.unary_unary(request, context)
            except BusinessException as exc:
                status = business_code_to_grpc_status(exc.code)
                _set_error_metadata(context, exc.code, exc.error_type or "BusinessError")
                set_mapped_error()
                # Concise business error log (no stack)
                logger.warning(
                    "grpc_mapped_error",
                    method=method,
                    code=str(exc.code),
                    status=str(status),
                    message=exc.message,
                )
                await context.abort(status, exc.message)
            except grpc.aio.AbortError:
                raise
            except Exception as exc:
                _set_error_metadata(context, BusinessCode.SYSTEM_ERROR, "SystemError")
                set_mapped_error()
                logger.error(
                    "grpc_mapped_error",
                    method=method,
                    code=str(BusinessCode.SYSTEM_ERROR.value),
                    status=str(grpc.StatusCode.INTERNAL),
                    message=str(exc),
                    exc_info=True,
                )
                await context.abort(grpc.StatusCode.INTERNAL, "Internal server error")

        return grpc.unary_unary_rpc_method_handler(
            _unary_unary,
            request_deserializer=handler.request_deserializer,
            response_serializer=handler.response_serializer,
        )
