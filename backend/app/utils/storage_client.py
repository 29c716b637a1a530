from typing import Optional
import io
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from minio import Minio
from minio.error import S3Error

from app.core.config import settings
from app.core.exceptions import StorageError
from app.core.logging_config import logger


class StorageClient:
    """S3/MinIO storage for uploaded verification documents"""

    def __init__(self):
        if settings.USE_MINIO:
            # MinIO client
            self.client = Minio(
                settings.MINIO_ENDPOINT,
                access_key=settings.AWS_ACCESS_KEY_ID,
                secret_key=settings.AWS_SECRET_ACCESS_KEY,
                secure=settings.MINIO_SECURE
            )
            self.is_minio = True
        else:
            # AWS S3 client
            self.client = boto3.client(
                's3',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
                region_name=settings.AWS_REGION
            )
            self.is_minio = False

        self.bucket_name = settings.S3_BUCKET_NAME
        self._bucket_checked = False

    def _ensure_bucket_exists(self):
        """Create the bucket on first upload if it is missing"""
        if self._bucket_checked:
            return
        if self.is_minio:
            if not self.client.bucket_exists(self.bucket_name):
                self.client.make_bucket(self.bucket_name)
                logger.info(f"Created MinIO bucket: {self.bucket_name}")
        else:
            try:
                self.client.head_bucket(Bucket=self.bucket_name)
            except ClientError:
                self.client.create_bucket(
                    Bucket=self.bucket_name,
                    CreateBucketConfiguration={'LocationConstraint': settings.AWS_REGION}
                )
                logger.info(f"Created S3 bucket: {self.bucket_name}")
        self._bucket_checked = True

    def upload_bytes(
        self,
        data: bytes,
        object_name: str,
        content_type: Optional[str] = None
    ) -> str:
        """
        Upload a byte payload

        Args:
            data: File contents
            object_name: Object key in the bucket
            content_type: MIME type

        Returns:
            Durable URL of the stored object
        """
        try:
            self._ensure_bucket_exists()
            if self.is_minio:
                self.client.put_object(
                    self.bucket_name,
                    object_name,
                    io.BytesIO(data),
                    len(data),
                    content_type=content_type or "application/octet-stream"
                )
            else:
                extra_args = {}
                if content_type:
                    extra_args['ContentType'] = content_type

                self.client.upload_fileobj(
                    io.BytesIO(data),
                    self.bucket_name,
                    object_name,
                    ExtraArgs=extra_args
                )
        except (S3Error, ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading {object_name}: {e}")
            raise StorageError(object_name, str(e))

        logger.info(f"Uploaded file object: {object_name}")
        return self.get_file_url(object_name)

    def delete_file(self, object_name: str) -> bool:
        """Delete file from storage"""
        try:
            if self.is_minio:
                self.client.remove_object(self.bucket_name, object_name)
            else:
                self.client.delete_object(
                    Bucket=self.bucket_name,
                    Key=object_name
                )
        except (S3Error, ClientError, BotoCoreError) as e:
            logger.error(f"Error deleting file: {e}")
            return False

        logger.info(f"Deleted file: {object_name}")
        return True

    def get_file_url(self, object_name: str) -> str:
        """Non-expiring URL; the stored URL must outlive any presigned window"""
        if settings.STORAGE_PUBLIC_URL:
            return f"{settings.STORAGE_PUBLIC_URL.rstrip('/')}/{object_name}"
        if self.is_minio:
            scheme = "https" if settings.MINIO_SECURE else "http"
            return f"{scheme}://{settings.MINIO_ENDPOINT}/{self.bucket_name}/{object_name}"
        return f"https://{self.bucket_name}.s3.{settings.AWS_REGION}.amazonaws.com/{object_name}"


# Created on first use; tests override get_storage_client instead
_storage_client: Optional[StorageClient] = None


def get_storage_client() -> StorageClient:
    """FastAPI dependency returning the shared storage client"""
    global _storage_client
    if _storage_client is None:
        _storage_client = StorageClient()
    return _storage_client
