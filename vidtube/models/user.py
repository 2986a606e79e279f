from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.base import BaseRecord


class User(BaseRecord):
    """Account and channel in one: every user owns a channel."""

    __tablename__ = "users"

    # stored lower-cased and trimmed; uniqueness is enforced by the store
    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    fullname: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    avatar: Mapped[str] = mapped_column(Text, nullable=False)
    avatar_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
