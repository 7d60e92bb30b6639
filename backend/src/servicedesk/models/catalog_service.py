"""CatalogService SQLAlchemy model"""

import re
from decimal import Decimal
from uuid import uuid4

from sqlalchemy import (
    Column, Text, Boolean, Numeric, DateTime, Uuid, Index, CheckConstraint
)
from sqlalchemy.orm import validates

from .base import Base, PortableJSONB, utcnow, in_clause
from ..catalog.schemas import ServiceCategory, URL_PATTERN


class CatalogService(Base):
    """A purchasable service (the catalog entity an order is placed against).

    Describes the documents a customer must submit, optional dropdown
    selectors and the additional form fields the order collects. Orders can
    only be placed against active services.
    """
    __tablename__ = "catalog_service"
    __table_args__ = (
        Index("ix_catalog_service_category", "category"),
        Index("ix_catalog_service_active_title", "is_active", "title"),
        CheckConstraint("price >= 0", name="ck_catalog_service_price"),
        CheckConstraint(
            in_clause("category", [c.value for c in ServiceCategory]),
            name="ck_catalog_service_category",
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    visit_link = Column(Text, nullable=True)
    required_documents_json = Column(
        PortableJSONB,
        nullable=False,
        default=list,
        comment="[{name, requires_ocr, compression_settings: {file_size, format, allowed_formats}}]"
    )
    custom_dropdowns_json = Column(
        PortableJSONB,
        nullable=False,
        default=list,
        comment="[{label, options: [{label, documents: [...]}]}]"
    )
    application_details_json = Column(PortableJSONB, nullable=False, default=dict)
    additional_fields_json = Column(
        PortableJSONB,
        nullable=False,
        default=dict,
        comment="{field_name: {label, type, required, placeholder, options}}"
    )
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    @validates('title')
    def validate_title(self, key, value):
        if not value or not value.strip():
            raise ValueError("Title is required")
        value = value.strip()
        if len(value) < 3 or len(value) > 100:
            raise ValueError("Title must be between 3 and 100 characters")
        return value

    @validates('description')
    def validate_description(self, key, value):
        if not value or not value.strip():
            raise ValueError("Description is required")
        value = value.strip()
        if len(value) < 10 or len(value) > 1000:
            raise ValueError("Description must be between 10 and 1000 characters")
        return value

    @validates('category')
    def validate_category(self, key, value):
        if isinstance(value, ServiceCategory):
            return value.value
        if value not in {c.value for c in ServiceCategory}:
            raise ValueError(f"{value} is not a valid category")
        return value

    @validates('price')
    def validate_price(self, key, value):
        if value is None:
            raise ValueError("Price is required")
        if Decimal(str(value)) < 0:
            raise ValueError("Price cannot be negative")
        return value

    @validates('visit_link')
    def validate_visit_link(self, key, value):
        if value and not re.match(URL_PATTERN, value):
            raise ValueError("Invalid URL format")
        return value

    @property
    def formatted_price(self) -> str:
        """Price as displayed on the storefront, e.g. '₹499.00'"""
        price = Decimal(str(self.price)) if self.price is not None else Decimal("0")
        return f"₹{price:.2f}"

    def __repr__(self):
        return f"<CatalogService(id={self.id}, title='{self.title}', category='{self.category}')>"
