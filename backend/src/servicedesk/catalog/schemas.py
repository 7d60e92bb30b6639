"""Pydantic schemas for the service catalog"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Dict, List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServiceCategory(str, Enum):
    """Catalog categories. Values are stored as TEXT and must match exactly."""
    DOCUMENTATION = "Documentation"
    LEGAL = "Legal"
    FINANCIAL = "Financial"
    EDUCATION = "Education"
    OTHER = "Other"


# Formats a compressed upload may be converted to
COMPRESSION_FORMATS = {"jpg", "jpeg", "png", "pdf"}
# Formats a customer may upload for a required document
UPLOAD_FORMATS = {"jpg", "jpeg", "png", "pdf", "doc", "docx"}
# Input types for service-defined form fields
FORM_FIELD_TYPES = {"text", "number", "date", "select", "file"}

URL_PATTERN = r'^(http|https)://[^ "]+$'


class CompressionSettings(BaseModel):
    """Upload constraints for one required document"""
    file_size: float = Field(5, gt=0, description="Maximum size in MB")
    format: str = "pdf"
    allowed_formats: List[str] = Field(default_factory=lambda: ["pdf"])

    @field_validator('format')
    @classmethod
    def validate_format(cls, v: str) -> str:
        v = v.lower()
        if v not in COMPRESSION_FORMATS:
            raise ValueError(
                f"Invalid format: {v}. Must be one of: {', '.join(sorted(COMPRESSION_FORMATS))}"
            )
        return v

    @field_validator('allowed_formats')
    @classmethod
    def validate_allowed_formats(cls, v: List[str]) -> List[str]:
        normalized = [fmt.lower() for fmt in v]
        unknown = sorted(set(normalized) - UPLOAD_FORMATS)
        if unknown:
            raise ValueError(f"Unsupported upload formats: {', '.join(unknown)}")
        return normalized


class RequiredDocumentSpec(BaseModel):
    """A document the customer must submit when ordering the service"""
    name: str = Field(..., min_length=1)
    requires_ocr: bool = False
    compression_settings: CompressionSettings = Field(default_factory=CompressionSettings)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Document name is required")
        return v.strip()


class DropdownOption(BaseModel):
    label: str = Field(..., min_length=1)
    documents: List[str] = Field(default_factory=list)


class CustomDropdown(BaseModel):
    """Selector shown on the order form; each option may require extra documents"""
    label: str = Field(..., min_length=1)
    options: List[DropdownOption] = Field(default_factory=list)


class FormFieldDefinition(BaseModel):
    """Schema of one additional field the order form collects"""
    label: str = Field(..., min_length=1)
    type: str
    required: bool = False
    placeholder: Optional[str] = None
    options: List[str] = Field(default_factory=list)

    @field_validator('type')
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v not in FORM_FIELD_TYPES:
            raise ValueError(
                f"Invalid field type: {v}. Must be one of: {', '.join(sorted(FORM_FIELD_TYPES))}"
            )
        return v


class CatalogServiceCreate(BaseModel):
    """Schema for creating a catalog service"""
    title: str = Field(..., min_length=3, max_length=100)
    category: ServiceCategory
    description: str = Field(..., min_length=10, max_length=1000)
    price: Decimal = Field(..., ge=0)
    visit_link: Optional[str] = Field(None, pattern=URL_PATTERN)
    required_documents: List[RequiredDocumentSpec] = Field(default_factory=list)
    custom_dropdowns: List[CustomDropdown] = Field(default_factory=list)
    application_details: Dict[str, str] = Field(default_factory=dict)
    additional_fields: Dict[str, FormFieldDefinition] = Field(default_factory=dict)
    is_active: bool = True

    @field_validator('title', 'description', mode='before')
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class ServiceSummary(BaseModel):
    """Catalog details joined onto order responses"""
    id: UUID
    title: str
    description: str
    price: Decimal
    category: str

    model_config = ConfigDict(from_attributes=True)


class CatalogServiceResponse(ServiceSummary):
    """Full catalog service representation"""
    visit_link: Optional[str] = None
    required_documents_json: List[dict] = Field(default_factory=list)
    custom_dropdowns_json: List[dict] = Field(default_factory=list)
    application_details_json: Dict[str, str] = Field(default_factory=dict)
    additional_fields_json: Dict[str, dict] = Field(default_factory=dict)
    is_active: bool
    formatted_price: str
    created_at: datetime
    updated_at: datetime
