from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from vidtube.config import settings
from vidtube.core.security import hash_password
from vidtube.db import Database
from vidtube.models import User, Video
from vidtube.services.media_service import MediaService
from vidtube.services.storage.base import StorageService

PASSWORD = "s3cret-pass"
_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeStorage(StorageService):
    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_upload = False
        self.fail_delete = False

    def upload_file(
        self, object_name: str, file_path: str, content_type: str | None = None
    ) -> None:
        if self.fail_upload:
            raise ConnectionError("storage unavailable")
        self.objects[object_name] = Path(file_path).read_bytes()

    def delete_file(self, object_name: str) -> None:
        if self.fail_delete:
            raise ConnectionError("storage unavailable")
        self.objects.pop(object_name, None)
        self.deleted.append(object_name)

    def public_url(self, object_name: str) -> str:
        return f"http://storage.test/media/{object_name}"


@pytest.fixture(autouse=True)
def _token_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "JWT_SECRET", "test-jwt-secret")
    monkeypatch.setattr(settings, "JWT_ALGORITHM", "HS256")
    monkeypatch.setattr(settings, "REFRESH_TOKEN_SECRET", "test-refresh-secret")


@pytest_asyncio.fixture
async def database() -> AsyncIterator[Database]:
    database = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def db(database: Database) -> AsyncIterator[AsyncSession]:
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def media(storage: FakeStorage, monkeypatch: pytest.MonkeyPatch) -> MediaService:
    monkeypatch.setattr("vidtube.services.media_service.probe_duration", lambda path: 42)
    return MediaService(storage)


@pytest.fixture
def staged(tmp_path: Path) -> Callable[..., Path]:
    """Write a file the way a multipart upload is staged on disk."""

    def _stage(name: str, content: bytes = b"media-bytes") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _stage


@pytest.fixture
def make_user(db: AsyncSession) -> Callable[..., Awaitable[User]]:
    password_hash = hash_password(PASSWORD)

    async def _make(username: str, fullname: Optional[str] = None) -> User:
        user = User(
            username=username.lower(),
            email=f"{username.lower()}@example.com",
            fullname=fullname or username.title(),
            avatar=f"http://storage.test/media/avatars/{username}.png",
            avatar_key=f"avatars/{username}.png",
            password=password_hash,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_video(db: AsyncSession) -> Callable[..., Awaitable[Video]]:
    # distinct creation times keep recency ordering deterministic
    ticks = count(1)

    async def _make(
        owner: User,
        title: str = "title",
        description: str = "description",
        is_published: bool = True,
        views: int = 0,
        duration: int = 60,
    ) -> Video:
        created_at = _BASE_TIME + timedelta(minutes=next(ticks))
        video = Video(
            title=title,
            description=description,
            video_file=f"http://storage.test/media/videos/{title}.mp4",
            video_file_key=f"videos/{title}.mp4",
            thumbnail=f"http://storage.test/media/thumbnails/{title}.png",
            thumbnail_key=f"thumbnails/{title}.png",
            duration=duration,
            views=views,
            is_published=is_published,
            owner_id=owner.id,
            created_at=created_at,
            updated_at=created_at,
        )
        db.add(video)
        await db.commit()
        await db.refresh(video)
        return video

    return _make
