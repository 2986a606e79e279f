from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    page_size: int


class ToggleResponse(BaseModel):
    """Result of a toggle: which way it went and the target's new count."""

    action: Literal["added", "removed"]
    count: int
