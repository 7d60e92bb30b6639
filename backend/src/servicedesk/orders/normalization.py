"""Normalization of submitted documents and additional fields

Turns raw order payloads into plain records ready to be attached to a review
order. Documents are matched to uploaded files by position, either through an
inline ``file`` or a multipart part named ``documents[<i>][file]``; matched
files are pushed to document storage and only the returned reference is kept.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..documents.ports import DocumentStoragePort, UploadedFile
from .errors import DuplicateFieldName
from .schemas import SubmittedDocument, AdditionalFieldInput
from .status import FieldType

logger = logging.getLogger(__name__)

FILE_FIELD_TEMPLATE = "documents[{index}][file]"


@dataclass
class NormalizedDocument:
    document_name: str
    ocr_data_json: Dict[str, Any] = field(default_factory=dict)
    storage_hash: Optional[str] = None
    storage_url: Optional[str] = None
    file_uploaded: bool = False


@dataclass
class NormalizedField:
    field_name: str
    field_value: Any
    field_type: str = FieldType.TEXT.value


def _as_model(model, value):
    return value if isinstance(value, model) else model.model_validate(value)


def normalize_documents(
    documents: Optional[Iterable[Any]],
    files: Optional[Iterable[UploadedFile]] = None,
    storage: Optional[DocumentStoragePort] = None
) -> List[NormalizedDocument]:
    """Normalize submitted documents and store their uploaded files.

    Args:
        documents: SubmittedDocument models or dicts, in submission order
        files: Multipart uploads; ``documents[i][file]`` belongs to document ``i``
        storage: Document storage used for matched files

    Returns:
        One NormalizedDocument per submitted document, same order

    Raises:
        StorageError: If storing a file fails (nothing is persisted)
    """
    files_by_field = {upload.fieldname: upload for upload in files or []}
    normalized = []

    for index, raw in enumerate(documents or []):
        document = _as_model(SubmittedDocument, raw)
        record = NormalizedDocument(
            document_name=document.document_name,
            ocr_data_json=dict(document.ocr_data or {}),
        )

        upload = document.file or files_by_field.get(FILE_FIELD_TEMPLATE.format(index=index))
        if upload is not None:
            if storage is None:
                logger.warning(
                    f"No document storage configured, ignoring upload for '{document.document_name}'"
                )
            else:
                stored = storage.store(upload.content, upload.filename, upload.content_type)
                record.storage_hash = stored.hash
                record.storage_url = stored.url
                record.file_uploaded = True

        normalized.append(record)

    return normalized


def normalize_additional_fields(fields: Optional[Iterable[Any]]) -> List[NormalizedField]:
    """Normalize additional fields and reject duplicate names.

    Names are compared after trimming; a missing field type defaults to "text".

    Raises:
        DuplicateFieldName: If two fields share a name
    """
    seen = set()
    normalized = []

    for raw in fields or []:
        item = _as_model(AdditionalFieldInput, raw)
        if item.field_name in seen:
            raise DuplicateFieldName(item.field_name)
        seen.add(item.field_name)
        normalized.append(NormalizedField(
            field_name=item.field_name,
            field_value=item.field_value,
            field_type=(item.field_type or FieldType.TEXT).value,
        ))

    return normalized
