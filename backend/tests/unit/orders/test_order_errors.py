"""Unit tests for lifecycle errors and their HTTP mapping"""

import pytest
from fastapi import HTTPException

from servicedesk.orders.errors import (
    OrderError,
    UserNotFound,
    ServiceUnavailable,
    OrderNotFound,
    DuplicateFieldName,
    InvalidTransition,
    TransactionFailed,
    to_http_exception,
)


class TestHTTPMapping:
    """Test error classes map to the expected status codes"""

    @pytest.mark.parametrize("error, status_code", [
        (UserNotFound("no profile"), 404),
        (OrderNotFound("no order"), 404),
        (ServiceUnavailable("inactive"), 400),
        (DuplicateFieldName("Email"), 400),
        (InvalidTransition("rejected"), 409),
        (TransactionFailed("approve failed", RuntimeError("disk full")), 409),
    ])
    def test_status_codes(self, error, status_code):
        exc = to_http_exception(error)
        assert isinstance(exc, HTTPException)
        assert exc.status_code == status_code
        assert exc.detail == str(error)

    def test_all_errors_share_base(self):
        for cls in (UserNotFound, ServiceUnavailable, OrderNotFound, InvalidTransition):
            assert issubclass(cls, OrderError)


class TestErrorDetails:
    def test_duplicate_field_name_message(self):
        error = DuplicateFieldName("Email")
        assert error.field_name == "Email"
        assert "Duplicate field names are not allowed" in str(error)

    def test_transaction_failed_keeps_original(self):
        original = RuntimeError("connection lost")
        error = TransactionFailed("Approval failed", original)
        assert error.original is original
        assert "connection lost" in str(error)
