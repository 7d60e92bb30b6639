"""Order lifecycle manager - business logic for review and finalized orders.

Collaborators (user profiles, catalog, document storage, settings) are
injected; see ``servicedesk.dependencies.build_order_manager``.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Type, Union
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload, selectinload

from ..catalog.service import CatalogRepository
from ..config import Settings, get_settings
from ..database import transaction
from ..documents.ports import DocumentStoragePort, UploadedFile
from ..models.base import utcnow
from ..models.catalog_service import CatalogService
from ..models.finalized_order import FinalizedOrder
from ..models.review_order import ReviewOrder, ReviewOrderDocument, ReviewOrderField
from ..models.user_profile import UserProfile
from ..users.service import UserProfileRepository
from .approval import approve_review_order
from .errors import UserNotFound, ServiceUnavailable, OrderNotFound
from .history import apply_status_side_effects
from .normalization import (
    NormalizedDocument,
    NormalizedField,
    normalize_documents,
    normalize_additional_fields,
)
from .schemas import (
    StatusOverrides,
    ReviewOrderUpdate,
    OrderHistoryQuery,
    OrderHistoryResult,
    ReviewOrderPage,
    FinalizedOrderPage,
    ReviewOrderResponse,
    FinalizedOrderResponse,
)
from .status import (
    TRACKED_FIELDS,
    DEFAULT_STATUS,
    DEFAULT_TRACKING_STATUS,
    DEFAULT_CHAT_STATUS,
    DEFAULT_APPROVE_STATUS,
)

logger = logging.getLogger(__name__)


def _document_rows(documents: List[NormalizedDocument]) -> List[ReviewOrderDocument]:
    return [
        ReviewOrderDocument(
            position=position,
            document_name=document.document_name,
            storage_hash=document.storage_hash,
            storage_url=document.storage_url,
            ocr_data_json=document.ocr_data_json,
            file_uploaded=document.file_uploaded,
        )
        for position, document in enumerate(documents)
    ]


def _field_rows(fields: List[NormalizedField]) -> List[ReviewOrderField]:
    return [
        ReviewOrderField(
            position=position,
            field_name=item.field_name,
            field_value=item.field_value,
            field_type=item.field_type,
        )
        for position, item in enumerate(fields)
    ]


class OrderLifecycleManager:
    """Service for the order lifecycle: create, update, approve, history."""

    def __init__(
        self,
        db: Session,
        users: Optional[UserProfileRepository] = None,
        catalog: Optional[CatalogRepository] = None,
        storage: Optional[DocumentStoragePort] = None,
        settings: Optional[Settings] = None
    ):
        self.db = db
        self.users = users or UserProfileRepository(db)
        self.catalog = catalog or CatalogRepository(db)
        self.storage = storage
        self.settings = settings or get_settings()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _resolve_owner(self, owner_ref) -> UserProfile:
        profile = self.users.find_by_owner_ref(owner_ref)
        if not profile:
            raise UserNotFound(f"User profile not found for {owner_ref}")
        return profile

    def _available_service(self, service_id: UUID) -> CatalogService:
        service = self.catalog.find_by_id(service_id)
        if not service or not service.is_active:
            raise ServiceUnavailable(f"Service {service_id} not found or inactive")
        return service

    def get_review_order(self, order_id: UUID) -> ReviewOrder:
        """Get a review order with its service, owner and child rows loaded.

        Raises:
            OrderNotFound: If no review order has this id
        """
        order = self.db.query(ReviewOrder).options(
            joinedload(ReviewOrder.service),
            joinedload(ReviewOrder.user),
            selectinload(ReviewOrder.documents),
            selectinload(ReviewOrder.additional_fields),
            selectinload(ReviewOrder.status_history),
        ).filter(ReviewOrder.id == order_id).first()

        if not order:
            raise OrderNotFound(f"Review order {order_id} not found")
        return order

    def get_finalized_order(self, order_id: UUID) -> FinalizedOrder:
        """Get a finalized order with its service, owner and documents loaded.

        Raises:
            OrderNotFound: If no finalized order has this id
        """
        order = self.db.query(FinalizedOrder).options(
            joinedload(FinalizedOrder.service),
            joinedload(FinalizedOrder.user),
            selectinload(FinalizedOrder.documents),
        ).filter(FinalizedOrder.id == order_id).first()

        if not order:
            raise OrderNotFound(f"Finalized order {order_id} not found")
        return order

    # ------------------------------------------------------------------
    # Lifecycle operations
    # ------------------------------------------------------------------

    def create_order(
        self,
        owner_ref,
        service_id: UUID,
        documents: Optional[Iterable[Any]] = None,
        additional_fields: Optional[Iterable[Any]] = None,
        files: Optional[Iterable[UploadedFile]] = None,
        status: Optional[str] = None,
        tracking_status: Optional[str] = None,
        chat_status: Optional[str] = None,
        approve_status: Optional[str] = None
    ) -> ReviewOrder:
        """Create a review order for an owner.

        Args:
            owner_ref: Auth principal id of the owner
            service_id: Catalog service being ordered
            documents: Submitted documents (``SubmittedDocument`` or dicts)
            additional_fields: Additional field values (``AdditionalFieldInput`` or dicts)
            files: Multipart uploads matched to documents by position
            status, tracking_status, chat_status, approve_status: Optional
                initial values; surrounding whitespace is ignored

        Returns:
            The persisted ReviewOrder with service and owner loaded

        Raises:
            UserNotFound: If the owner has no profile
            ServiceUnavailable: If the service is missing or inactive
            DuplicateFieldName: If two additional fields share a name
            ValidationError: If a status value is not recognized
        """
        profile = self._resolve_owner(owner_ref)
        service = self._available_service(service_id)

        overrides = StatusOverrides(
            status=status,
            tracking_status=tracking_status,
            chat_status=chat_status,
            approve_status=approve_status,
        )
        normalized_fields = normalize_additional_fields(additional_fields)
        normalized_documents = normalize_documents(documents, files, self.storage)

        order = ReviewOrder(
            user_id=profile.id,
            service_id=service.id,
            order_identifier='',
            selector_field='',
            status=(overrides.status or DEFAULT_STATUS).value,
            tracking_status=(overrides.tracking_status or DEFAULT_TRACKING_STATUS).value,
            chat_status=(overrides.chat_status or DEFAULT_CHAT_STATUS).value,
            approve_status=(overrides.approve_status or DEFAULT_APPROVE_STATUS).value,
        )
        order.documents = _document_rows(normalized_documents)
        order.additional_fields = _field_rows(normalized_fields)

        # The initial state is the first history entry
        apply_status_side_effects(order, TRACKED_FIELDS, updated_by=owner_ref)

        with transaction(self.db):
            self.db.add(order)

        logger.info(
            f"Created review order {order.id} for service '{service.title}'",
            extra={
                "order_id": order.id,
                "user_id": profile.id,
                "service_id": service.id,
                "status": order.status,
                "tracking_status": order.tracking_status,
            }
        )

        return self.get_review_order(order.id)

    def update_review_order(
        self,
        order_id: UUID,
        update: Union[ReviewOrderUpdate, Dict[str, Any]],
        updated_by: Optional[str] = None,
        files: Optional[Iterable[UploadedFile]] = None
    ) -> ReviewOrder:
        """Apply a partial update to a review order.

        Only fields present and not null in ``update`` are applied. Documents and
        additional fields are replaced as a whole and re-normalized. A change
        to any tracked status field appends a history entry; a data-clearing
        status drops OCR payloads and additional fields.

        Args:
            order_id: Review order to update
            update: ReviewOrderUpdate or dict of the same shape
            updated_by: Principal id of the actor (recorded in history)
            files: Multipart uploads for the replacement documents

        Returns:
            Updated ReviewOrder with service and owner loaded

        Raises:
            OrderNotFound: If no review order has this id
            DuplicateFieldName: If two additional fields share a name
        """
        if not isinstance(update, ReviewOrderUpdate):
            update = ReviewOrderUpdate.model_validate(update)
        provided = update.model_fields_set

        order = self.get_review_order(order_id)

        # Validate everything before touching the order
        new_fields = None
        if 'additional_fields' in provided and update.additional_fields is not None:
            new_fields = normalize_additional_fields(update.additional_fields)
        new_documents = None
        if 'documents' in provided and update.documents is not None:
            new_documents = normalize_documents(update.documents, files, self.storage)

        changed = []
        with transaction(self.db):
            if new_documents is not None:
                order.documents.clear()
                self.db.flush()
                order.documents.extend(_document_rows(new_documents))

            if new_fields is not None:
                # Old rows must be deleted before new ones reuse their names
                order.additional_fields.clear()
                self.db.flush()
                order.additional_fields.extend(_field_rows(new_fields))

            for name in ('order_identifier', 'selector_field'):
                value = getattr(update, name)
                if name in provided and value is not None:
                    setattr(order, name, value)

            for name in TRACKED_FIELDS:
                value = getattr(update, name)
                if name not in provided or value is None:
                    continue
                if value.value != getattr(order, name):
                    setattr(order, name, value.value)
                    changed.append(name)

            apply_status_side_effects(order, changed, updated_by=updated_by)
            order.updated_at = utcnow()

        if changed:
            logger.info(
                f"Order {order_id} status changed ({', '.join(changed)})",
                extra={
                    "order_id": order_id,
                    "user_id": updated_by,
                    "status": order.status,
                    "tracking_status": order.tracking_status,
                }
            )

        return self.get_review_order(order_id)

    def approve_order(self, order_id: UUID, approved_by: Optional[str] = None) -> FinalizedOrder:
        """Approve a review order; see ``orders.approval.approve_review_order``."""
        return approve_review_order(self.db, order_id, approved_by=approved_by)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_order_history(
        self,
        owner_ref,
        page: int = 1,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        start_date=None,
        end_date=None
    ) -> OrderHistoryResult:
        """Paginated review and finalized orders of one owner, newest first.

        Args:
            owner_ref: Auth principal id of the owner
            page: 1-indexed page number
            limit: Page size (defaults to DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE)
            status: Exact match on tracking status
            start_date: Inclusive lower bound on created_at
            end_date: Inclusive upper bound on created_at

        Returns:
            OrderHistoryResult with one page of each kind and their totals

        Raises:
            UserNotFound: If the owner has no profile
            ValidationError: If page/limit are below 1 or the range is inverted
        """
        query = OrderHistoryQuery(
            page=page,
            limit=min(
                limit if limit is not None else self.settings.DEFAULT_PAGE_SIZE,
                self.settings.MAX_PAGE_SIZE
            ),
            status=status,
            start_date=start_date,
            end_date=end_date,
        )
        profile = self._resolve_owner(owner_ref)

        review_orders, review_total = self._paginate(
            ReviewOrder,
            profile.id,
            query,
            selectinload(ReviewOrder.documents),
            selectinload(ReviewOrder.additional_fields),
            selectinload(ReviewOrder.status_history),
        )
        finalized_orders, finalized_total = self._paginate(
            FinalizedOrder,
            profile.id,
            query,
            selectinload(FinalizedOrder.documents),
        )

        return OrderHistoryResult(
            review=ReviewOrderPage(
                orders=[ReviewOrderResponse.model_validate(o) for o in review_orders],
                **self._page_meta(review_total, query)
            ),
            finalized=FinalizedOrderPage(
                orders=[FinalizedOrderResponse.model_validate(o) for o in finalized_orders],
                **self._page_meta(finalized_total, query)
            ),
        )

    def _paginate(self, model: Type, user_id: UUID, query: OrderHistoryQuery, *loaders):
        base = self.db.query(model).filter(model.user_id == user_id)

        if query.status:
            base = base.filter(model.tracking_status == query.status)
        if query.start_date:
            base = base.filter(model.created_at >= query.start_date)
        if query.end_date:
            base = base.filter(model.created_at <= query.end_date)

        total = base.count()

        items = base.options(
            joinedload(model.service),
            joinedload(model.user),
            *loaders
        ).order_by(
            desc(model.created_at)
        ).offset(
            (query.page - 1) * query.limit
        ).limit(query.limit).all()

        return items, total

    @staticmethod
    def _page_meta(total: int, query: OrderHistoryQuery) -> Dict[str, int]:
        return {
            "total": total,
            "page": query.page,
            "limit": query.limit,
            "total_pages": math.ceil(total / query.limit),
        }
