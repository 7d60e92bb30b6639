"""Unit tests for order manager wiring"""

from servicedesk.dependencies import build_order_manager
from servicedesk.infrastructure.storage import S3DocumentStorage


class TestBuildOrderManager:
    def test_default_wiring_uses_s3_storage(self, db_session, test_settings):
        manager = build_order_manager(db_session, settings=test_settings)

        assert isinstance(manager.storage, S3DocumentStorage)
        assert manager.storage.bucket_name == test_settings.S3_BUCKET_NAME

    def test_explicit_storage_kept(self, db_session, test_settings, document_storage):
        manager = build_order_manager(db_session, settings=test_settings, storage=document_storage)

        assert manager.storage is document_storage
        assert manager.settings is test_settings
