"""Status history snapshots and data-clearing side effects of status changes."""

import logging
from typing import Iterable, Optional

from ..models.review_order import ReviewOrder, OrderStatusHistory
from ..models.base import utcnow
from .status import is_data_clearing

logger = logging.getLogger(__name__)


def snapshot_status(order: ReviewOrder, updated_by: Optional[str] = None) -> OrderStatusHistory:
    """Append the order's current status fields to its history.

    Entries are numbered from 1 in append order.
    """
    entry = OrderStatusHistory(
        entry_no=len(order.status_history) + 1,
        status=order.status,
        tracking_status=order.tracking_status,
        chat_status=order.chat_status,
        approve_status=order.approve_status,
        updated_by=str(updated_by) if updated_by is not None else None,
        updated_at=utcnow(),
    )
    order.status_history.append(entry)
    return entry


def clear_sensitive_data(order: ReviewOrder) -> None:
    """Drop OCR payloads and additional fields; document names and references stay."""
    for document in order.documents:
        document.ocr_data_json = {}
    order.additional_fields.clear()


def apply_status_side_effects(
    order: ReviewOrder,
    changed_fields: Iterable[str],
    updated_by: Optional[str] = None
) -> Optional[OrderStatusHistory]:
    """Record history for changed status fields and enforce data clearing.

    Args:
        order: Review order with the new values already applied
        changed_fields: Tracked fields whose value actually changed
        updated_by: Principal id of the actor

    Returns:
        The appended history entry, or None if nothing tracked changed
    """
    changed_fields = list(changed_fields)
    entry = snapshot_status(order, updated_by) if changed_fields else None

    if is_data_clearing(order.status):
        clear_sensitive_data(order)
        logger.info(
            f"Cleared OCR data and additional fields of order {order.id}",
            extra={"order_id": order.id, "status": order.status}
        )

    return entry
