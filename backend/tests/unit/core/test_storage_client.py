"""
Unit Tests for the object storage client
Tests for: backend selection, bucket creation, upload URLs, error mapping
"""
import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError

from app.core.config import settings
from app.core.exceptions import StorageError
from app.utils.storage_client import StorageClient


@pytest.fixture
def s3_client():
    """StorageClient on the boto3 path with a mocked S3 client"""
    with patch.object(settings, 'USE_MINIO', False), \
            patch.object(settings, 'STORAGE_PUBLIC_URL', ''), \
            patch('app.utils.storage_client.boto3') as mock_boto3:
        mock_s3 = MagicMock()
        mock_boto3.client.return_value = mock_s3
        yield StorageClient(), mock_s3


@pytest.fixture
def minio_client():
    with patch.object(settings, 'USE_MINIO', True), \
            patch.object(settings, 'MINIO_SECURE', False), \
            patch.object(settings, 'STORAGE_PUBLIC_URL', ''), \
            patch('app.utils.storage_client.Minio') as mock_minio_cls:
        mock_minio = MagicMock()
        mock_minio.bucket_exists.return_value = False
        mock_minio_cls.return_value = mock_minio
        yield StorageClient(), mock_minio


class TestS3Backend:

    def test_upload_returns_bucket_url(self, s3_client):
        client, mock_s3 = s3_client

        url = client.upload_bytes(b'data', 'verification/u1/a.png', content_type='image/png')

        assert url == (f'https://{settings.S3_BUCKET_NAME}.s3.{settings.AWS_REGION}'
                       f'.amazonaws.com/verification/u1/a.png')
        _, kwargs = mock_s3.upload_fileobj.call_args
        assert kwargs['ExtraArgs'] == {'ContentType': 'image/png'}

    def test_missing_bucket_created_once(self, s3_client):
        client, mock_s3 = s3_client
        mock_s3.head_bucket.side_effect = ClientError({'Error': {'Code': '404'}}, 'HeadBucket')

        client.upload_bytes(b'one', 'a')
        client.upload_bytes(b'two', 'b')

        mock_s3.create_bucket.assert_called_once()
        assert mock_s3.head_bucket.call_count == 1

    def test_upload_failure_raises_storage_error(self, s3_client):
        client, mock_s3 = s3_client
        mock_s3.upload_fileobj.side_effect = ClientError({'Error': {'Code': '500'}}, 'PutObject')

        with pytest.raises(StorageError) as exc_info:
            client.upload_bytes(b'data', 'verification/u1/a.png')

        assert exc_info.value.status_code == 502
        assert exc_info.value.details['object_key'] == 'verification/u1/a.png'

    def test_delete_failure_returns_false(self, s3_client):
        client, mock_s3 = s3_client
        mock_s3.delete_object.side_effect = ClientError({'Error': {'Code': '403'}}, 'DeleteObject')

        assert client.delete_file('verification/u1/a.png') is False

    def test_public_url_override(self, s3_client):
        client, _ = s3_client

        with patch.object(settings, 'STORAGE_PUBLIC_URL', 'https://cdn.college.edu/'):
            assert client.get_file_url('a/b.pdf') == 'https://cdn.college.edu/a/b.pdf'


class TestMinioBackend:

    def test_upload_creates_bucket_and_puts_object(self, minio_client):
        client, mock_minio = minio_client

        url = client.upload_bytes(b'data', 'verification/u1/a.pdf', content_type='application/pdf')

        mock_minio.make_bucket.assert_called_once_with(settings.S3_BUCKET_NAME)
        args, kwargs = mock_minio.put_object.call_args
        assert args[0] == settings.S3_BUCKET_NAME
        assert args[1] == 'verification/u1/a.pdf'
        assert args[3] == 4
        assert kwargs['content_type'] == 'application/pdf'
        assert url == f'http://{settings.MINIO_ENDPOINT}/{settings.S3_BUCKET_NAME}/verification/u1/a.pdf'

    def test_delete(self, minio_client):
        client, mock_minio = minio_client

        assert client.delete_file('verification/u1/a.pdf') is True
        mock_minio.remove_object.assert_called_once_with(settings.S3_BUCKET_NAME, 'verification/u1/a.pdf')
