"""Documents domain module - order document uploads and the storage port"""

from .ports import DocumentStoragePort, StoredDocument, UploadedFile, StorageError

__all__ = [
    "DocumentStoragePort",
    "StoredDocument",
    "UploadedFile",
    "StorageError",
]
