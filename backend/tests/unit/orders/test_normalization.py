"""Unit tests for document and additional field normalization"""

import logging

import pytest
from pydantic import ValidationError

from servicedesk.documents.ports import UploadedFile
from servicedesk.orders.errors import DuplicateFieldName
from servicedesk.orders.normalization import normalize_documents, normalize_additional_fields
from servicedesk.orders.schemas import SubmittedDocument


class TestNormalizeDocuments:
    """Test submitted documents become storable records"""

    def test_defaults(self):
        result = normalize_documents([{"documentName": "Aadhaar Card"}])

        assert len(result) == 1
        assert result[0].document_name == "Aadhaar Card"
        assert result[0].ocr_data_json == {}
        assert result[0].file_uploaded is False
        assert result[0].storage_url is None

    def test_snake_case_and_models_accepted(self):
        result = normalize_documents([
            {"document_name": "PAN Card", "ocr_data": {"pan": "ABCDE1234F"}},
            SubmittedDocument(document_name="Photo"),
        ])

        assert [d.document_name for d in result] == ["PAN Card", "Photo"]
        assert result[0].ocr_data_json == {"pan": "ABCDE1234F"}

    def test_empty_input(self):
        assert normalize_documents(None) == []
        assert normalize_documents([]) == []

    def test_files_matched_by_position(self, document_storage):
        files = [
            UploadedFile("documents[1][file]", "photo.png", b"png-bytes", "image/png"),
        ]

        result = normalize_documents(
            [{"documentName": "PAN Card"}, {"documentName": "Photo"}],
            files=files,
            storage=document_storage,
        )

        assert result[0].file_uploaded is False
        assert result[1].file_uploaded is True
        assert result[1].storage_url.startswith("memory://documents/")
        assert result[1].storage_hash in document_storage.objects
        assert document_storage.calls == 1

    def test_inline_file(self, document_storage):
        upload = UploadedFile("file", "passport.pdf", b"%PDF-1.4", "application/pdf")

        result = normalize_documents(
            [SubmittedDocument(document_name="Passport", file=upload)],
            storage=document_storage,
        )

        assert result[0].file_uploaded is True
        assert document_storage.objects[result[0].storage_hash] == b"%PDF-1.4"

    def test_upload_without_storage_is_ignored(self, caplog):
        files = [UploadedFile("documents[0][file]", "a.pdf", b"data")]

        with caplog.at_level(logging.WARNING):
            result = normalize_documents([{"documentName": "Passport"}], files=files)

        assert result[0].file_uploaded is False
        assert "No document storage configured" in caplog.text

    def test_missing_name_rejected(self):
        with pytest.raises(ValidationError):
            normalize_documents([{"ocrData": {}}])


class TestNormalizeAdditionalFields:
    """Test additional field normalization and duplicate detection"""

    def test_field_type_defaults_to_text(self):
        result = normalize_additional_fields([{"fieldName": "Father's Name", "fieldValue": "R. Verma"}])

        assert result[0].field_name == "Father's Name"
        assert result[0].field_value == "R. Verma"
        assert result[0].field_type == "text"

    def test_explicit_field_type(self):
        result = normalize_additional_fields([
            {"field_name": "Age", "field_value": 34, "field_type": "number"},
        ])
        assert result[0].field_type == "number"
        assert result[0].field_value == 34

    def test_duplicate_names_rejected(self):
        with pytest.raises(DuplicateFieldName) as exc_info:
            normalize_additional_fields([
                {"fieldName": "Email", "fieldValue": "a@example.com"},
                {"fieldName": " Email ", "fieldValue": "b@example.com"},
            ])
        assert exc_info.value.field_name == "Email"

    def test_names_are_case_sensitive(self):
        result = normalize_additional_fields([
            {"fieldName": "email", "fieldValue": "a"},
            {"fieldName": "Email", "fieldValue": "b"},
        ])
        assert len(result) == 2

    def test_unknown_field_type_rejected(self):
        with pytest.raises(ValidationError):
            normalize_additional_fields([{"fieldName": "Scan", "fieldType": "file"}])

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            normalize_additional_fields([{"fieldName": "   "}])
