from __future__ import annotations

import mimetypes
from pathlib import Path

from minio import Minio
from minio.error import S3Error

from vidtube.config import settings
from vidtube.core.fault_tolerance import RetryConfig, retry
from vidtube.services.storage.base import StorageService

_RETRYABLE = (S3Error, ConnectionError, TimeoutError)


class MinioStorageService(StorageService):
    def __init__(self) -> None:
        endpoint = settings.MINIO_ENDPOINT
        access_key = settings.MINIO_ACCESS_KEY
        secret_key = settings.MINIO_SECRET_KEY
        use_ssl = settings.MINIO_USE_SSL
        bucket = settings.MINIO_BUCKET
        if not endpoint or not access_key or not secret_key or use_ssl is None:
            raise RuntimeError("MinIO settings are not set")
        if not bucket:
            raise RuntimeError("MINIO_BUCKET is not set")
        self._bucket = bucket
        self._endpoint = endpoint
        self._scheme = "https" if use_ssl else "http"
        self._client = Minio(
            endpoint=endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=bool(use_ssl),
        )

    @retry(RetryConfig(max_attempts=3, initial_delay=1.0, max_delay=10.0), exceptions=_RETRYABLE)
    def upload_file(
        self, object_name: str, file_path: str, content_type: str | None = None
    ) -> None:
        resolved_type = content_type or mimetypes.guess_type(file_path)[0]
        self._client.fput_object(
            bucket_name=self._bucket,
            object_name=object_name,
            file_path=str(Path(file_path)),
            content_type=resolved_type or "application/octet-stream",
        )

    @retry(RetryConfig(max_attempts=3, initial_delay=0.5, max_delay=5.0), exceptions=_RETRYABLE)
    def delete_file(self, object_name: str) -> None:
        self._client.remove_object(bucket_name=self._bucket, object_name=object_name)

    def public_url(self, object_name: str) -> str:
        base = settings.MINIO_PUBLIC_URL or f"{self._scheme}://{self._endpoint}"
        return f"{base.rstrip('/')}/{self._bucket}/{object_name}"
