from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from sqlalchemy import ColumnElement

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _positive_int(value: object, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    return number if number > 0 else default


@dataclass(frozen=True)
class PageQuery:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def parse(cls, page: object = None, limit: object = None) -> PageQuery:
        """Lenient parsing: absent or invalid values fall back to the defaults."""
        return cls(
            page=_positive_int(page, DEFAULT_PAGE),
            limit=_positive_int(limit, DEFAULT_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortQuery:
    sort_by: Optional[str] = None
    direction: SortDirection = SortDirection.DESC

    @classmethod
    def parse(cls, sort_by: Optional[str] = None, sort_type: Optional[str] = None) -> SortQuery:
        try:
            direction = SortDirection((sort_type or "").strip().lower())
        except ValueError:
            direction = SortDirection.DESC
        field = sort_by.strip() if sort_by and sort_by.strip() else None
        return cls(sort_by=field, direction=direction)

    def order_by(
        self,
        columns: Mapping[str, ColumnElement[Any]],
        default: str,
    ) -> ColumnElement[Any]:
        """Resolve the requested field against an allow-list; unknown fields use ``default``."""
        column = columns.get(self.sort_by or default, columns[default])
        if self.direction is SortDirection.ASC:
            return column.asc()
        return column.desc()
