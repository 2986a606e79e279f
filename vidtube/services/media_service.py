"""Media collaborator: staged local files in, stable public URLs out."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import subprocess  # nosec
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union
from uuid import uuid4

from vidtube.config import settings
from vidtube.core.exceptions import BusinessError
from vidtube.i18n.codes import ErrorCode
from vidtube.services.storage.base import StorageService

logger = logging.getLogger("vidtube.media")

PathLike = Union[str, Path]


class MediaKind(str, Enum):
    VIDEO = "video"
    IMAGE = "image"


@dataclass(frozen=True)
class UploadedMedia:
    url: str
    public_id: str
    duration: Optional[int] = None


def _split_extensions(raw: str) -> frozenset[str]:
    return frozenset(ext.strip().lower().lstrip(".") for ext in raw.split(",") if ext.strip())


def probe_duration(file_path: PathLike) -> Optional[int]:
    """Duration in whole seconds via ffprobe, or None when it cannot be determined."""
    try:
        result = subprocess.run(  # nosec
            [
                "ffprobe",
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                str(file_path),
            ],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0 and result.stdout.strip():
            return int(float(result.stdout.strip()))
    except (OSError, ValueError, subprocess.SubprocessError) as exc:
        logger.warning("Failed to probe duration for %s: %s", file_path, exc)
    return None


class MediaService:
    def __init__(
        self,
        storage: StorageService,
        video_extensions: Optional[Iterable[str]] = None,
        image_extensions: Optional[Iterable[str]] = None,
    ) -> None:
        self._storage = storage
        self._allowed = {
            MediaKind.VIDEO: frozenset(video_extensions)
            if video_extensions is not None
            else _split_extensions(settings.UPLOAD_ALLOWED_VIDEO_EXTENSIONS),
            MediaKind.IMAGE: frozenset(image_extensions)
            if image_extensions is not None
            else _split_extensions(settings.UPLOAD_ALLOWED_IMAGE_EXTENSIONS),
        }

    async def upload(
        self,
        local_path: PathLike,
        folder: str,
        kind: MediaKind = MediaKind.IMAGE,
        field: str = "file",
    ) -> UploadedMedia:
        """Upload a staged file; the local copy is removed whatever the outcome."""
        path = Path(local_path)
        try:
            extension = path.suffix.lower().lstrip(".")
            allowed = self._allowed[kind]
            if extension not in allowed:
                raise BusinessError(
                    ErrorCode.UNSUPPORTED_FILE_FORMAT, allowed=", ".join(sorted(allowed))
                )
            duration = None
            if kind is MediaKind.VIDEO:
                duration = await asyncio.to_thread(probe_duration, path)
            object_name = f"{folder}/{uuid4().hex}.{extension}"
            content_type = mimetypes.guess_type(path.name)[0]
            try:
                await asyncio.to_thread(
                    self._storage.upload_file, object_name, str(path), content_type
                )
            except Exception as exc:
                logger.error("media upload failed: field=%s object=%s: %s", field, object_name, exc)
                raise BusinessError(ErrorCode.MEDIA_UPLOAD_FAILED, field=field) from exc
            logger.info("media uploaded: object=%s", object_name)
            return UploadedMedia(
                url=self._storage.public_url(object_name),
                public_id=object_name,
                duration=duration,
            )
        finally:
            path.unlink(missing_ok=True)

    async def delete(self, public_id: str) -> None:
        try:
            await asyncio.to_thread(self._storage.delete_file, public_id)
        except Exception as exc:
            logger.error("media delete failed: object=%s: %s", public_id, exc)
            raise BusinessError(ErrorCode.MEDIA_DELETE_FAILED) from exc
        logger.info("media deleted: object=%s", public_id)

    async def delete_quietly(self, *public_ids: Optional[str]) -> None:
        """Compensating cleanup: failures are logged, never raised."""
        for public_id in public_ids:
            if not public_id:
                continue
            try:
                await self.delete(public_id)
            except BusinessError:
                logger.warning("orphaned media left in storage: object=%s", public_id)

    @staticmethod
    def discard(*local_paths: Optional[PathLike]) -> None:
        """Remove staged files that will never reach storage."""
        for local_path in local_paths:
            if local_path:
                Path(local_path).unlink(missing_ok=True)
