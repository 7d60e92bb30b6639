"""SQLAlchemy Models for ServiceDesk"""

from .base import Base, PortableJSONB
from .user_profile import UserProfile
from .catalog_service import CatalogService
from .review_order import ReviewOrder, ReviewOrderDocument, ReviewOrderField, OrderStatusHistory
from .finalized_order import FinalizedOrder, FinalizedOrderDocument

__all__ = [
    "Base",
    "PortableJSONB",
    "UserProfile",
    "CatalogService",
    "ReviewOrder",
    "ReviewOrderDocument",
    "ReviewOrderField",
    "OrderStatusHistory",
    "FinalizedOrder",
    "FinalizedOrderDocument",
]
