"""Approval of review orders.

Approving moves an order out of review for good: a FinalizedOrder is created
from the review order's header and document names and links, and the review
order (with its documents, fields and history) is deleted. Both happen in one
transaction, so an order is never visible in both places and never lost.
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session, joinedload, selectinload

from ..database import transaction
from ..models.base import utcnow
from ..models.review_order import ReviewOrder
from ..models.finalized_order import FinalizedOrder, FinalizedOrderDocument
from .errors import OrderNotFound, TransactionFailed
from .status import FinalizedTrackingStatus, validate_approvable

logger = logging.getLogger(__name__)


def build_finalized_order(review: ReviewOrder, approved_at: datetime | None = None) -> FinalizedOrder:
    """Build the finalized record for a review order.

    OCR payloads and additional fields are not carried over; documents keep
    their name and storage link only.
    """
    finalized = FinalizedOrder(
        source_order_id=review.id,
        user_id=review.user_id,
        service_id=review.service_id,
        order_identifier=review.order_identifier or '',
        selector_field=review.selector_field or '',
        additional_fields_json=[],
        tracking_status=FinalizedTrackingStatus.APPROVED.value,
        approved_at=approved_at or utcnow(),
    )
    finalized.documents = [
        FinalizedOrderDocument(
            position=document.position,
            document_name=document.document_name,
            storage_url=document.storage_url or '',
            ocr_data_json={},
        )
        for document in review.documents
    ]
    return finalized


def _remove_review(db: Session, review: ReviewOrder) -> None:
    db.delete(review)


def approve_review_order(db: Session, order_id: UUID, approved_by: str | None = None) -> FinalizedOrder:
    """Approve a review order, turning it into a finalized order.

    Args:
        db: Database session
        order_id: Review order to approve
        approved_by: Principal id of the approver (logged)

    Returns:
        FinalizedOrder with service and owner loaded

    Raises:
        OrderNotFound: If no review order has this id
        InvalidTransition: If the order is in a rejected tracking state
        TransactionFailed: If creating the finalized order or deleting the
            review order fails; nothing is changed in that case

    Example:
        finalized = approve_review_order(db, order_id, approved_by="admin-7")
    """
    review = db.query(ReviewOrder).options(
        selectinload(ReviewOrder.documents)
    ).filter(ReviewOrder.id == order_id).first()

    if not review:
        raise OrderNotFound(f"Review order {order_id} not found")

    validate_approvable(review)

    finalized = build_finalized_order(review)

    try:
        with transaction(db):
            db.add(finalized)
            db.flush()
            _remove_review(db, review)
            db.flush()
    except Exception as e:
        logger.error(
            f"Approval of order {order_id} rolled back: {e}",
            extra={"order_id": order_id, "user_id": approved_by},
            exc_info=True
        )
        raise TransactionFailed(f"Approval of order {order_id} failed", e) from e

    logger.info(
        f"Approved order {order_id} as finalized order {finalized.id}",
        extra={"order_id": order_id, "user_id": approved_by}
    )

    return db.query(FinalizedOrder).options(
        joinedload(FinalizedOrder.service),
        joinedload(FinalizedOrder.user),
        selectinload(FinalizedOrder.documents)
    ).filter(FinalizedOrder.id == finalized.id).one()
