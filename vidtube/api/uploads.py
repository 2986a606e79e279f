"""Stage multipart uploads on local disk before they reach the media service."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import BinaryIO, Optional
from uuid import uuid4

from fastapi import UploadFile

from vidtube.config import settings


def _copy_to(source: BinaryIO, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("wb") as handle:
        shutil.copyfileobj(source, handle)


async def stage_upload(upload: Optional[UploadFile]) -> Optional[Path]:
    if upload is None or not upload.filename:
        return None
    suffix = Path(upload.filename).suffix.lower()
    target = Path(settings.UPLOAD_TEMP_DIR) / f"{uuid4().hex}{suffix}"
    try:
        await asyncio.to_thread(_copy_to, upload.file, target)
    finally:
        await upload.close()
    return target
