"""Wiring of the order lifecycle manager and its collaborators.

This module provides:
- bootstrap: configure logging and the database from settings
- build_document_storage: S3 document storage from settings
- build_order_manager: OrderLifecycleManager bound to a session

Callers (HTTP layer, CLI scripts, tests) build a manager per unit of work:

    session_factory = bootstrap()
    with session_factory() as db:
        manager = build_order_manager(db)
        manager.approve_order(order_id, approved_by=principal_id)
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from .catalog.service import CatalogRepository
from .config import Settings, get_settings
from .database import configure_database
from .documents.ports import DocumentStoragePort
from .infrastructure.storage import S3DocumentStorage
from .observability.logging_config import configure_logging
from .orders.service import OrderLifecycleManager
from .users.service import UserProfileRepository

logger = logging.getLogger(__name__)


def bootstrap(settings: Optional[Settings] = None) -> sessionmaker:
    """Configure logging and the database for a process.

    Returns:
        The configured session factory
    """
    settings = settings or get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    factory = configure_database(settings)
    logger.info(f"ServiceDesk backend configured (environment={settings.ENVIRONMENT})")
    return factory


def build_document_storage(settings: Optional[Settings] = None) -> DocumentStoragePort:
    """Create the S3 document storage from settings."""
    settings = settings or get_settings()
    return S3DocumentStorage(
        endpoint_url=settings.S3_ENDPOINT_URL,
        access_key=settings.S3_ACCESS_KEY_ID,
        secret_key=settings.S3_SECRET_ACCESS_KEY,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
    )


def build_order_manager(
    db: Session,
    settings: Optional[Settings] = None,
    storage: Optional[DocumentStoragePort] = None
) -> OrderLifecycleManager:
    """Create an OrderLifecycleManager bound to ``db``.

    Args:
        db: Database session for this unit of work
        settings: Settings (defaults to the cached process settings)
        storage: Document storage (defaults to the S3 storage from settings)

    Returns:
        OrderLifecycleManager
    """
    settings = settings or get_settings()
    if storage is None:
        storage = build_document_storage(settings)
    return OrderLifecycleManager(
        db,
        users=UserProfileRepository(db),
        catalog=CatalogRepository(db),
        storage=storage,
        settings=settings,
    )
