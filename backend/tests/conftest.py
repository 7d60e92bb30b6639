"""Pytest fixtures for order lifecycle testing.

Provides reusable test fixtures for:
- In-memory SQLite database session (fresh schema per test)
- Test user profiles and catalog services
- In-memory document storage
- OrderLifecycleManager wired like production

Usage:
    def test_create(order_manager, owner, catalog_service):
        order = order_manager.create_order(owner.auth_id, catalog_service.id)
        assert order.status == "pending"
"""

import hashlib
from decimal import Decimal
from typing import Dict, Generator

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from servicedesk.config import Settings
from servicedesk.database import build_session_factory
from servicedesk.dependencies import build_order_manager
from servicedesk.documents.ports import DocumentStoragePort, StoredDocument
from servicedesk.models import Base, UserProfile, CatalogService


class InMemoryDocumentStorage(DocumentStoragePort):
    """Content-addressed storage kept in a dict (for tests)."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.calls = 0

    def store(self, content: bytes, filename: str, content_type: str) -> StoredDocument:
        self.calls += 1
        digest = hashlib.sha256(content).hexdigest()
        self.objects[digest] = content
        return StoredDocument(
            hash=digest,
            url=f"memory://documents/{digest}",
            size_bytes=len(content),
            content_type=content_type,
        )


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests (no .env, plain-text logs)."""
    return Settings(
        DATABASE_URL="sqlite://",
        LOG_JSON=False,
        DEFAULT_PAGE_SIZE=10,
        MAX_PAGE_SIZE=100,
    )


@pytest.fixture(scope="function")
def engine():
    """Create an in-memory SQLite engine with every table.

    StaticPool keeps the single in-memory database alive across connections.
    """
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def owner(db_session: Session) -> UserProfile:
    """Create the profile of the customer placing orders."""
    profile = UserProfile(
        auth_id="auth-owner-1",
        first_name="Asha",
        last_name="Verma",
        display_email="asha@example.com",
    )
    db_session.add(profile)
    db_session.commit()
    return profile


@pytest.fixture
def other_owner(db_session: Session) -> UserProfile:
    """Create a second customer profile."""
    profile = UserProfile(auth_id="auth-owner-2", first_name="Ravi")
    db_session.add(profile)
    db_session.commit()
    return profile


@pytest.fixture
def catalog_service(db_session: Session) -> CatalogService:
    """Create an active catalog service."""
    service = CatalogService(
        title="Passport Renewal",
        category="Documentation",
        description="Renew an expired passport with doorstep document pickup",
        price=Decimal("499.00"),
        required_documents_json=[
            {
                "name": "Old Passport",
                "requires_ocr": True,
                "compression_settings": {"file_size": 5, "format": "pdf", "allowed_formats": ["pdf"]},
            }
        ],
        custom_dropdowns_json=[],
        application_details_json={"processing_time": "7 days"},
        additional_fields_json={},
    )
    db_session.add(service)
    db_session.commit()
    return service


@pytest.fixture
def inactive_service(db_session: Session) -> CatalogService:
    """Create a catalog service that no longer accepts orders."""
    service = CatalogService(
        title="Legacy Affidavit",
        category="Legal",
        description="Discontinued affidavit drafting service",
        price=Decimal("150.00"),
        is_active=False,
    )
    db_session.add(service)
    db_session.commit()
    return service


@pytest.fixture
def document_storage() -> InMemoryDocumentStorage:
    return InMemoryDocumentStorage()


@pytest.fixture
def order_manager(db_session, test_settings, document_storage):
    """OrderLifecycleManager bound to the test session."""
    return build_order_manager(db_session, settings=test_settings, storage=document_storage)
