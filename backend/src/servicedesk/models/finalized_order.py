"""Finalized Order model for ServiceDesk

The terminal projection of an approved review order. Created exactly once per
order attempt by the approval transaction (``source_order_id`` is unique) and
never edited afterwards. Sensitive per-order data is not carried over:
document OCR payloads are empty and additional fields are an empty list.
"""

from uuid import uuid4

from sqlalchemy import (
    Column, Text, Integer, DateTime, Uuid, ForeignKey, Index, CheckConstraint,
    UniqueConstraint
)
from sqlalchemy.orm import relationship

from .base import Base, PortableJSONB, utcnow, in_clause
from ..orders.status import FinalizedTrackingStatus


class FinalizedOrder(Base):
    """Approved order record."""

    __tablename__ = 'finalized_order'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    source_order_id = Column(
        Uuid(as_uuid=True),
        nullable=False,
        comment="Id of the review order this record replaced"
    )

    user_id = Column(Uuid(as_uuid=True), ForeignKey('user_profile.id'), nullable=False)
    service_id = Column(Uuid(as_uuid=True), ForeignKey('catalog_service.id'), nullable=False)

    order_identifier = Column(Text, nullable=False, default='')
    selector_field = Column(Text, nullable=False, default='')
    additional_fields_json = Column(PortableJSONB, nullable=False, default=list)

    tracking_status = Column(Text, nullable=False, default=FinalizedTrackingStatus.APPROVED.value)
    approved_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('source_order_id', name='uq_finalized_order_source'),
        Index('ix_finalized_order_user_created', 'user_id', 'created_at'),
        CheckConstraint(
            in_clause('tracking_status', [s.value for s in FinalizedTrackingStatus]),
            name='ck_finalized_order_tracking_status'
        ),
    )

    user = relationship("UserProfile")
    service = relationship("CatalogService")
    documents = relationship(
        "FinalizedOrderDocument",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="FinalizedOrderDocument.position"
    )

    def __repr__(self):
        return f"<FinalizedOrder(id={self.id}, source_order_id={self.source_order_id})>"


class FinalizedOrderDocument(Base):
    """Document reference kept on a finalized order (OCR payload cleared)."""

    __tablename__ = 'finalized_order_document'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    finalized_order_id = Column(
        Uuid(as_uuid=True),
        ForeignKey('finalized_order.id', ondelete='CASCADE'),
        nullable=False
    )
    position = Column(Integer, nullable=False)
    document_name = Column(Text, nullable=False)
    storage_url = Column(Text, nullable=False, default='')
    ocr_data_json = Column(PortableJSONB, nullable=False, default=dict)

    order = relationship("FinalizedOrder", back_populates="documents")
