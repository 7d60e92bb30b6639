"""Document Storage Port - domain interface for storing order document uploads.

Adapters implement this interface to persist raw uploads (S3, MinIO, ...) and
hand back a stable reference that is saved on the order document. From the
lifecycle manager's point of view storage is synchronous.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class StorageError(Exception):
    """Raised when an upload cannot be stored."""
    pass


@dataclass
class UploadedFile:
    """A raw file attached to an order request.

    Attributes:
        fieldname: Multipart field name, e.g. ``documents[0][file]``
        filename: Original client filename
        content: File bytes
        content_type: MIME type reported by the client
    """
    fieldname: str
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass
class StoredDocument:
    """Reference to an upload persisted by a storage adapter.

    Attributes:
        hash: SHA256 of the content (hex)
        url: Stable URL or key the document can be fetched from
        size_bytes: Size of the stored content
        content_type: MIME type of the stored content
    """
    hash: str
    url: str
    size_bytes: int
    content_type: Optional[str] = None


class DocumentStoragePort(ABC):
    """Port interface for persisting order document uploads.

    Example Usage:
        storage = S3DocumentStorage(...)
        stored = storage.store(upload.content, upload.filename, upload.content_type)
        document.storage_hash, document.storage_url = stored.hash, stored.url
    """

    @abstractmethod
    def store(self, content: bytes, filename: str, content_type: str) -> StoredDocument:
        """Store an upload and return its stable reference.

        Storing identical content twice returns the same reference.

        Raises:
            StorageError: If the backend rejects or cannot reach storage
            ValueError: If content is empty
        """
        pass
