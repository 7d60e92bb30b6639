"""Storage adapters"""

from .s3_document_storage import S3DocumentStorage

__all__ = ["S3DocumentStorage"]
