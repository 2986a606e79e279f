from __future__ import annotations

from vidtube.services.storage.base import StorageService
from vidtube.services.storage.factory import get_storage_service
from vidtube.services.storage.minio import MinioStorageService

__all__ = ["StorageService", "MinioStorageService", "get_storage_service"]
