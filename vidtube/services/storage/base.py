from __future__ import annotations

from abc import ABC, abstractmethod


class StorageService(ABC):
    @abstractmethod
    def upload_file(
        self, object_name: str, file_path: str, content_type: str | None = None
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_file(self, object_name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def public_url(self, object_name: str) -> str:
        raise NotImplementedError
