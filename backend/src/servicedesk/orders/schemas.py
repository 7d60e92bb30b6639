"""Pydantic schemas for the order lifecycle

Input payloads accept both snake_case and the camelCase keys used by the
storefront clients (``documentName``, ``fieldName``, ``trackingStatus``...).
Response models are built from ORM objects (``from_attributes``).
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from ..catalog.schemas import ServiceSummary
from ..documents.ports import UploadedFile
from .status import OrderStatus, TrackingStatus, ToggleStatus, FieldType


def _strip(value):
    return value.strip() if isinstance(value, str) else value


# ============================================================================
# Input Schemas
# ============================================================================

class SubmittedDocument(BaseModel):
    """One document submitted with an order"""
    document_name: str = Field(..., min_length=1, alias="documentName")
    ocr_data: Optional[Dict[str, Any]] = Field(None, alias="ocrData")
    file: Optional[UploadedFile] = None

    model_config = ConfigDict(populate_by_name=True)


class AdditionalFieldInput(BaseModel):
    """One additional form field value"""
    field_name: str = Field(..., min_length=1, alias="fieldName")
    field_value: Any = Field(None, alias="fieldValue")
    field_type: Optional[FieldType] = Field(None, alias="fieldType")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('field_name')
    @classmethod
    def strip_field_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field name cannot be empty")
        return v.strip()


class StatusOverrides(BaseModel):
    """Optional initial status values for a new order"""
    status: Optional[OrderStatus] = None
    tracking_status: Optional[TrackingStatus] = Field(None, alias="trackingStatus")
    chat_status: Optional[ToggleStatus] = Field(None, alias="chatStatus")
    approve_status: Optional[ToggleStatus] = Field(None, alias="approveStatus")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('status', 'tracking_status', 'chat_status', 'approve_status', mode='before')
    @classmethod
    def strip_values(cls, v):
        v = _strip(v)
        return v or None


class ReviewOrderUpdate(StatusOverrides):
    """Partial update of a review order (only set fields are applied)"""
    documents: Optional[List[SubmittedDocument]] = None
    additional_fields: Optional[List[AdditionalFieldInput]] = Field(None, alias="additionalFields")
    order_identifier: Optional[str] = Field(None, alias="orderIdentifier")
    selector_field: Optional[str] = Field(None, alias="selectorField")

    model_config = ConfigDict(populate_by_name=True, extra='forbid')


class OrderHistoryQuery(BaseModel):
    """Filters and pagination for an owner's order history"""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    status: Optional[str] = Field(None, description="Exact match on tracking status")
    start_date: Optional[datetime] = Field(None, alias="startDate")
    end_date: Optional[datetime] = Field(None, alias="endDate")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('start_date', 'end_date')
    @classmethod
    def to_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Timestamps are stored in UTC; aware bounds are converted to match"""
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc)
        return v

    @model_validator(mode='after')
    def check_date_range(self) -> 'OrderHistoryQuery':
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


# ============================================================================
# Response Schemas
# ============================================================================

class OwnerSummary(BaseModel):
    """Owner profile details joined onto order responses"""
    id: UUID
    auth_id: str
    full_name: str
    display_email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewDocumentResponse(BaseModel):
    id: UUID
    document_name: str
    storage_hash: Optional[str] = None
    storage_url: Optional[str] = None
    ocr_data_json: Dict[str, Any] = Field(default_factory=dict)
    file_uploaded: bool = False

    model_config = ConfigDict(from_attributes=True)


class AdditionalFieldResponse(BaseModel):
    field_name: str
    field_value: Any = None
    field_type: str

    model_config = ConfigDict(from_attributes=True)


class StatusHistoryEntry(BaseModel):
    entry_no: int
    status: str
    tracking_status: str
    chat_status: str
    approve_status: str
    updated_by: Optional[str] = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewOrderResponse(BaseModel):
    """Response schema for a review order with catalog and owner details"""
    id: UUID
    user_id: UUID
    service_id: UUID
    order_identifier: str
    selector_field: str
    status: str
    tracking_status: str
    chat_status: str
    approve_status: str
    documents: List[ReviewDocumentResponse] = Field(default_factory=list)
    additional_fields: List[AdditionalFieldResponse] = Field(default_factory=list)
    status_history: List[StatusHistoryEntry] = Field(default_factory=list)
    service: Optional[ServiceSummary] = None
    user: Optional[OwnerSummary] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FinalizedDocumentResponse(BaseModel):
    id: UUID
    document_name: str
    storage_url: str
    ocr_data_json: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class FinalizedOrderResponse(BaseModel):
    """Response schema for a finalized order with catalog and owner details"""
    id: UUID
    source_order_id: UUID
    user_id: UUID
    service_id: UUID
    order_identifier: str
    selector_field: str
    additional_fields_json: List[Any] = Field(default_factory=list)
    tracking_status: str
    documents: List[FinalizedDocumentResponse] = Field(default_factory=list)
    service: Optional[ServiceSummary] = None
    user: Optional[OwnerSummary] = None
    approved_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReviewOrderPage(BaseModel):
    orders: List[ReviewOrderResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class FinalizedOrderPage(BaseModel):
    orders: List[FinalizedOrderResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class OrderHistoryResult(BaseModel):
    """Paginated review and finalized orders of one owner"""
    review: ReviewOrderPage
    finalized: FinalizedOrderPage
