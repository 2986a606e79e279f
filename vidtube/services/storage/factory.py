from __future__ import annotations

from functools import lru_cache

from vidtube.services.storage.base import StorageService
from vidtube.services.storage.minio import MinioStorageService


@lru_cache(maxsize=1)
def get_storage_service() -> StorageService:
    return MinioStorageService()
