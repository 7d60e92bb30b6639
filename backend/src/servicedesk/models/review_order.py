"""Review Order model for ServiceDesk

Represents an order while it is still editable and moving through the
workflow. A review order owns its submitted documents, additional form
fields and an append-only status history; all three are child tables
with their own ids rather than inline arrays.

Lifecycle:
1. Created on order placement (status=pending, tracking_status="Order Placed")
2. Edited by the customer or an admin (status changes, document edits)
3. Either cleared on completion/cancellation/rejection, or consumed exactly
   once by approval, which deletes it and creates a FinalizedOrder
"""

from uuid import uuid4

from sqlalchemy import (
    Column, Text, Boolean, Integer, DateTime, Uuid, ForeignKey, Index,
    CheckConstraint, UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base, PortableJSONB, utcnow, in_clause
from ..orders.status import (
    OrderStatus,
    TrackingStatus,
    ToggleStatus,
    FieldType,
    REJECTED_TRACKING_STATUSES,
)

_TRACKING_VALUES = sorted({t.value for t in TrackingStatus} | REJECTED_TRACKING_STATUSES)
_TOGGLE_VALUES = [t.value for t in ToggleStatus]


class ReviewOrder(Base):
    """Order header while in review.

    ``user_id`` references the owner's profile (not the auth id) and
    ``service_id`` the catalog service ordered.
    """

    __tablename__ = 'review_order'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    user_id = Column(Uuid(as_uuid=True), ForeignKey('user_profile.id'), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey('catalog_service.id'), nullable=False)

    order_identifier = Column(Text, nullable=False, default='')
    selector_field = Column(
        Text,
        nullable=False,
        default='',
        comment="Option picked in the service's custom dropdown"
    )

    # Workflow state (no transition table; see orders.status)
    status = Column(Text, nullable=False, default=OrderStatus.PENDING.value)
    tracking_status = Column(Text, nullable=False, default=TrackingStatus.ORDER_PLACED.value)
    chat_status = Column(Text, nullable=False, default=ToggleStatus.ENABLED.value)
    approve_status = Column(Text, nullable=False, default=ToggleStatus.DISABLED.value)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index('ix_review_order_user_created', 'user_id', 'created_at'),
        Index('ix_review_order_user_tracking', 'user_id', 'tracking_status'),
        CheckConstraint(in_clause('status', [s.value for s in OrderStatus]), name='ck_review_order_status'),
        CheckConstraint(in_clause('tracking_status', _TRACKING_VALUES), name='ck_review_order_tracking_status'),
        CheckConstraint(in_clause('chat_status', _TOGGLE_VALUES), name='ck_review_order_chat_status'),
        CheckConstraint(in_clause('approve_status', _TOGGLE_VALUES), name='ck_review_order_approve_status'),
    )

    user = relationship("UserProfile")
    service = relationship("CatalogService")
    documents = relationship(
        "ReviewOrderDocument",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="ReviewOrderDocument.position"
    )
    additional_fields = relationship(
        "ReviewOrderField",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="ReviewOrderField.position"
    )
    status_history = relationship(
        "OrderStatusHistory",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusHistory.entry_no"
    )

    def __repr__(self):
        return f"<ReviewOrder(id={self.id}, status='{self.status}', tracking_status='{self.tracking_status}')>"


class ReviewOrderDocument(Base):
    """Document submitted with a review order.

    ``position`` keeps the order in which documents were submitted, which is
    also how file uploads are associated with them.
    """

    __tablename__ = 'review_order_document'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    review_order_id = Column(
        Uuid(as_uuid=True),
        ForeignKey('review_order.id', ondelete='CASCADE'),
        nullable=False
    )
    position = Column(Integer, nullable=False)
    document_name = Column(Text, nullable=False)
    storage_hash = Column(Text, nullable=True, comment="Content hash returned by document storage")
    storage_url = Column(Text, nullable=True, comment="Stable URL returned by document storage")
    ocr_data_json = Column(PortableJSONB, nullable=False, default=dict)
    file_uploaded = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index('ix_review_order_document_order', 'review_order_id'),
    )

    order = relationship("ReviewOrder", back_populates="documents")


class ReviewOrderField(Base):
    """Additional form field captured on a review order.

    Field names are unique within one order.
    """

    __tablename__ = 'review_order_field'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    review_order_id = Column(
        Uuid(as_uuid=True),
        ForeignKey('review_order.id', ondelete='CASCADE'),
        nullable=False
    )
    position = Column(Integer, nullable=False)
    field_name = Column(Text, nullable=False)
    field_value = Column(PortableJSONB, nullable=True)
    field_type = Column(Text, nullable=False, default=FieldType.TEXT.value)

    __table_args__ = (
        UniqueConstraint('review_order_id', 'field_name', name='uq_review_order_field_name'),
        CheckConstraint(in_clause('field_type', [f.value for f in FieldType]), name='ck_review_order_field_type'),
    )

    order = relationship("ReviewOrder", back_populates="additional_fields")


class OrderStatusHistory(Base):
    """Append-only snapshot of a review order's status fields.

    One row per change of status, tracking_status, chat_status or
    approve_status. Rows are never updated.
    """

    __tablename__ = 'order_status_history'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    review_order_id = Column(
        Uuid(as_uuid=True),
        ForeignKey('review_order.id', ondelete='CASCADE'),
        nullable=False
    )
    entry_no = Column(Integer, nullable=False, comment="1-indexed, unique per review_order")
    status = Column(Text, nullable=False)
    tracking_status = Column(Text, nullable=False)
    chat_status = Column(Text, nullable=False)
    approve_status = Column(Text, nullable=False)
    updated_by = Column(Text, nullable=True, comment="Principal id of the actor, if known")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint('review_order_id', 'entry_no', name='uq_order_status_history_entry'),
    )

    order = relationship("ReviewOrder", back_populates="status_history")
