"""Catalog service repository - creation, lookup and search."""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..models.catalog_service import CatalogService
from .schemas import CatalogServiceCreate, ServiceCategory

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Repository for catalog services."""

    def __init__(self, db: Session):
        self.db = db

    def create_service(self, data: CatalogServiceCreate) -> CatalogService:
        """Persist a validated catalog service.

        Args:
            data: Validated create payload

        Returns:
            The new CatalogService (flushed, not committed)
        """
        service = CatalogService(
            title=data.title,
            category=data.category.value,
            description=data.description,
            price=data.price,
            visit_link=data.visit_link,
            required_documents_json=[doc.model_dump() for doc in data.required_documents],
            custom_dropdowns_json=[dropdown.model_dump() for dropdown in data.custom_dropdowns],
            application_details_json=dict(data.application_details),
            additional_fields_json={
                name: definition.model_dump() for name, definition in data.additional_fields.items()
            },
            is_active=data.is_active,
        )
        self.db.add(service)
        self.db.flush()
        logger.info(
            f"Created catalog service '{service.title}'",
            extra={"service_id": service.id}
        )
        return service

    def find_by_id(self, service_id: UUID) -> Optional[CatalogService]:
        """Get a catalog service by id, active or not."""
        return self.db.get(CatalogService, service_id)

    def list_services(
        self,
        category: Optional[ServiceCategory] = None,
        search: Optional[str] = None,
        active_only: bool = True,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[CatalogService], int]:
        """List catalog services with filtering and pagination.

        Args:
            category: Only services in this category
            search: Case-insensitive text match on title or description
            active_only: Exclude inactive services
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (services sorted by title, total count)
        """
        query = self.db.query(CatalogService)

        if active_only:
            query = query.filter(CatalogService.is_active.is_(True))

        if category:
            query = query.filter(CatalogService.category == ServiceCategory(category).value)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    CatalogService.title.ilike(pattern),
                    CatalogService.description.ilike(pattern)
                )
            )

        total = query.count()
        services = query.order_by(CatalogService.title).limit(limit).offset(offset).all()
        return services, total
