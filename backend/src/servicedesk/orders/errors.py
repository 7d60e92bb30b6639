"""Order lifecycle errors.

Every lifecycle operation fails fast with one of these. Store errors raised
outside the approve transaction propagate unchanged; inside it they are
wrapped in ``TransactionFailed`` with the original chained as ``__cause__``.
"""

from fastapi import HTTPException, status


class OrderError(Exception):
    """Base class for order lifecycle errors."""

    http_status = status.HTTP_400_BAD_REQUEST


class UserNotFound(OrderError):
    """The owner reference does not resolve to a user profile."""

    http_status = status.HTTP_404_NOT_FOUND


class ServiceUnavailable(OrderError):
    """The catalog service is missing or inactive."""


class OrderNotFound(OrderError):
    """No order exists for the given id."""

    http_status = status.HTTP_404_NOT_FOUND


class DuplicateFieldName(OrderError):
    """Two additional fields in one order share a name."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Duplicate field names are not allowed: {field_name!r}")


class InvalidTransition(OrderError):
    """The requested lifecycle transition is not allowed (e.g. approving a rejected order)."""

    http_status = status.HTTP_409_CONFLICT


class TransactionFailed(OrderError):
    """The atomic approve step failed and was rolled back."""

    http_status = status.HTTP_409_CONFLICT

    def __init__(self, message: str, original: Exception):
        self.original = original
        super().__init__(f"{message}: {original}")


def to_http_exception(exc: OrderError) -> HTTPException:
    """Map a lifecycle error to the HTTP response callers should return.

    ``*NotFound`` errors become 404, rejected transitions and aborted
    transactions 409, everything else 400.

    Example:
        try:
            manager.approve_order(order_id)
        except OrderError as e:
            raise to_http_exception(e)
    """
    return HTTPException(status_code=exc.http_status, detail=str(exc))
