"""S3-compatible blob storage service for listing image upload URLs."""

import logging

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.core.exceptions import BlobStorageFailure

logger = logging.getLogger(__name__)


class BlobService:
    def __init__(self):
        self._client = None
        self.bucket = settings.BLOB_STORAGE_BUCKET
        self.expiry_seconds = settings.BLOB_PRESIGN_EXPIRY_SECONDS

    @property
    def client(self):
        if self._client is None:
            kwargs = {
                "service_name": "s3",
                "aws_access_key_id": settings.BLOB_STORAGE_ACCESS_KEY,
                "aws_secret_access_key": settings.BLOB_STORAGE_SECRET_KEY,
                "region_name": settings.BLOB_STORAGE_REGION,
                "config": BotoConfig(
                    signature_version="s3v4",
                    connect_timeout=settings.BLOB_CONNECT_TIMEOUT_SECONDS,
                    read_timeout=settings.BLOB_READ_TIMEOUT_SECONDS,
                    retries={"max_attempts": 2, "mode": "standard"},
                ),
            }
            if settings.BLOB_STORAGE_ENDPOINT:
                kwargs["endpoint_url"] = settings.BLOB_STORAGE_ENDPOINT
            self._client = boto3.client(**kwargs)
        return self._client

    def presign_upload(self, key: str, content_type: str = "application/octet-stream") -> str:
        try:
            return self.client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": key,
                    "ContentType": content_type,
                },
                ExpiresIn=self.expiry_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Could not presign upload for %s: %s", key, e)
            raise BlobStorageFailure() from e

    def public_url(self, key: str) -> str:
        base = settings.BLOB_PUBLIC_BASE_URL or settings.BLOB_STORAGE_ENDPOINT
        return f"{base.rstrip('/')}/{self.bucket}/{key}"


blob_service = BlobService()


def get_blob_service() -> BlobService:
    return blob_service
