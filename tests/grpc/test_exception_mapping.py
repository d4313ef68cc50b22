import grpc
import pytest

from grpc_app.interceptors.exceptions import business_code_to_grpc_status
from shared.codes import BusinessCode


@pytest.mark.parametrize("code", list(BusinessCode))
def test_every_business_code_has_a_status(code):
    # Unmapped codes would silently degrade to FAILED_PRECONDITION
    assert business_code_to_grpc_status(code) != grpc.StatusCode.FAILED_PRECONDITION


def test_business_codes_are_error_codes_only():
    assert all(code >= 10000 for code in BusinessCode)


@pytest.mark.parametrize(
    "code, expected",
    [
        (BusinessCode.PARAM_VALIDATION_ERROR, grpc.StatusCode.INVALID_ARGUMENT),
        (BusinessCode.BOOK_NOT_FOUND, grpc.StatusCode.NOT_FOUND),
        (BusinessCode.SERVICE_UNAVAILABLE, grpc.StatusCode.UNAVAILABLE),
        (BusinessCode.SYSTEM_ERROR, grpc.StatusCode.INTERNAL),
        (99999, grpc.StatusCode.FAILED_PRECONDITION),
    ],
)
def test_business_code_to_grpc_status(code, expected):
    assert business_code_to_grpc_status(code) == expected
