"""S3 Document Storage - Implementation of DocumentStoragePort using boto3.

Works against AWS S3 and S3-compatible services (MinIO in development).
Uploads are content-addressed, so storing the same bytes twice returns the
same reference without a second upload.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import hashlib
import logging
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ...documents.ports import DocumentStoragePort, StoredDocument, StorageError

logger = logging.getLogger(__name__)


class S3DocumentStorage(DocumentStoragePort):
    """S3-compatible document storage using boto3.

    Storage key format: documents/{sha256}{ext}

    Example:
        storage = S3DocumentStorage(
            endpoint_url=settings.S3_ENDPOINT_URL,
            access_key=settings.S3_ACCESS_KEY_ID,
            secret_key=settings.S3_SECRET_ACCESS_KEY,
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.S3_REGION,
        )
        stored = storage.store(b"%PDF-1.4...", "passport.pdf", "application/pdf")
    """

    KEY_PREFIX = "documents"

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
    ):
        """Initialize S3 document storage.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name
            region: AWS region (default: 'us-east-1')
        """
        self.s3_client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )
        self.endpoint_url = endpoint_url
        self.bucket_name = bucket_name
        self.region = region

        logger.info(
            f"Initialized S3 document storage: bucket={bucket_name}, "
            f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
        )

    def store(self, content: bytes, filename: str, content_type: str) -> StoredDocument:
        """Store an upload, skipping the upload if the content already exists.

        Raises:
            ValueError: If content is empty
            StorageError: If the upload fails
        """
        if not content:
            raise ValueError("Cannot store empty file")

        sha256_hex = hashlib.sha256(content).hexdigest()
        storage_key = self._storage_key(sha256_hex, filename)
        stored = StoredDocument(
            hash=sha256_hex,
            url=self._url_for(storage_key),
            size_bytes=len(content),
            content_type=content_type,
        )

        if self.exists(storage_key):
            logger.info(f"Document already stored (dedup): storage_key={storage_key}")
            return stored

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=storage_key,
                Body=content,
                ContentType=content_type,
                Metadata={
                    "sha256": sha256_hex,
                    "original-filename": filename,
                },
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"S3 upload failed: storage_key={storage_key}, error={error_code}"
            )
            raise StorageError(f"Failed to upload document: {error_code}") from e
        except BotoCoreError as e:
            logger.error(f"S3 upload failed: storage_key={storage_key}, error={e}")
            raise StorageError(f"Failed to upload document: {e}") from e

        logger.info(
            f"Uploaded document: storage_key={storage_key}, "
            f"size={len(content)}, content_type={content_type}"
        )
        return stored

    def exists(self, storage_key: str) -> bool:
        """Check if an object exists (HEAD request).

        Raises:
            StorageError: If the check fails for a reason other than a missing key
        """
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=storage_key)
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey", "NotFound"):
                return False
            logger.warning(
                f"Error checking document existence: storage_key={storage_key}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to check document: {error_code}") from e

    def _storage_key(self, sha256: str, filename: str) -> str:
        """Generate storage key in format: documents/{sha256}{ext}

        Example:
            >>> storage._storage_key("abc123", "Passport.PDF")
            'documents/abc123.pdf'
        """
        ext = Path(filename or "").suffix.lower()
        return f"{self.KEY_PREFIX}/{sha256}{ext}"

    def _url_for(self, storage_key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{storage_key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{storage_key}"
