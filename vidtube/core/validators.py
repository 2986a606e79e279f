from __future__ import annotations

import uuid
from typing import Optional

from vidtube.core.exceptions import BusinessError
from vidtube.i18n.codes import ErrorCode


def require_text(value: Optional[str], field: str) -> str:
    """Return ``value`` trimmed, or fail when it is missing or blank."""
    if value is None or not value.strip():
        raise BusinessError(ErrorCode.MISSING_REQUIRED_PARAMETER, field=field)
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def require_any(field: str, *values: object) -> None:
    if all(value is None for value in values):
        raise BusinessError(ErrorCode.MISSING_REQUIRED_PARAMETER, field=field)


def validate_id(value: Optional[str], field: str) -> str:
    """Canonical form of an entity id; malformed ids are a parameter error."""
    if not value:
        raise BusinessError(ErrorCode.MISSING_REQUIRED_PARAMETER, field=field)
    try:
        return str(uuid.UUID(value))
    except (ValueError, AttributeError, TypeError) as exc:
        raise BusinessError(ErrorCode.INVALID_PARAMETER, detail=f"invalid {field}") from exc
