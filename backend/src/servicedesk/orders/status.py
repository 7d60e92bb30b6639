"""Order status vocabulary and lifecycle rules.

A review order carries two independent status dimensions:

    status           internal workflow state (pending, processing, ...)
    tracking_status  customer-facing phase ("Order Placed" ... "Completed Successfully")

There is deliberately no transition table: any workflow status may be set to
any other through an update. Only two rules are enforced:

    - Entering a data-clearing status (completed, cancelled, rejected) wipes
      OCR payloads and additional fields.
    - Approval (review -> finalized) is refused for rejected orders.
"""

from enum import Enum
from typing import Optional

from .errors import InvalidTransition


class OrderStatus(str, Enum):
    """Workflow status of a review order."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    REJECTED = "rejected"
    FINALIZED = "finalized"
    CANCELLED = "cancelled"
    APPROVED = "approved"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_COMPLETED = "payment_completed"


class TrackingStatus(str, Enum):
    """Customer-facing phase of a review order."""
    ORDER_PLACED = "Order Placed"
    PAYMENT_PENDING = "Payment Pending"
    PAYMENT_COMPLETED = "Payment Completed"
    DOCUMENTS_UNDER_REVIEW = "Documents Under Review"
    DOCUMENTS_REJECTED = "Documents Rejected"
    REVIEW_COMPLETED = "Review Completed"
    PROCESSING_STARTED = "Processing Started"
    PENDING_APPROVAL = "Pending Approval"
    APPROVED = "Approved"
    CANCELLED = "Cancelled"
    COMPLETED_SUCCESSFULLY = "Completed Successfully"


class FinalizedTrackingStatus(str, Enum):
    """Customer-facing phase of a finalized order."""
    APPROVED = "Approved"
    COMPLETED = "Completed"


class ToggleStatus(str, Enum):
    """Chat / approve button state shown to the customer."""
    ENABLED = "Enabled"
    DISABLED = "Disabled"


class FieldType(str, Enum):
    """Type tag of an additional field value."""
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    BOOLEAN = "boolean"


DEFAULT_STATUS = OrderStatus.PENDING
DEFAULT_TRACKING_STATUS = TrackingStatus.ORDER_PLACED
DEFAULT_CHAT_STATUS = ToggleStatus.ENABLED
DEFAULT_APPROVE_STATUS = ToggleStatus.DISABLED

# Entering one of these ends sensitive data retention for the order
DATA_CLEARING_STATUSES = frozenset({
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
    OrderStatus.REJECTED,
})

# Fields whose changes are snapshotted into the status history
TRACKED_FIELDS = ("status", "tracking_status", "chat_status", "approve_status")

# Tracking values that block approval. "Rejected" is a legacy value outside the
# enumerated phrases; "Documents Rejected" orders may still be approved.
REJECTED_TRACKING_STATUSES = frozenset({"Rejected"})


def _value(status) -> Optional[str]:
    return status.value if isinstance(status, Enum) else status


def is_data_clearing(status) -> bool:
    """Check whether entering ``status`` must clear OCR data and additional fields.

    Example:
        >>> is_data_clearing("completed")
        True
        >>> is_data_clearing(OrderStatus.PROCESSING)
        False
    """
    return _value(status) in {s.value for s in DATA_CLEARING_STATUSES}


def can_approve(tracking_status) -> bool:
    """Check if an order with ``tracking_status`` may be approved."""
    return _value(tracking_status) not in REJECTED_TRACKING_STATUSES


def validate_approvable(order) -> None:
    """Validate that a review order may transition to finalized.

    Args:
        order: Review order (anything with ``id`` and ``tracking_status``)

    Raises:
        InvalidTransition: If the order is in a rejected tracking state
    """
    if not can_approve(order.tracking_status):
        raise InvalidTransition(
            f"Cannot approve rejected order {order.id} "
            f"(tracking status: {order.tracking_status})"
        )
