"""Ownership guard shared by every update/delete mutation."""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.i18n.codes import ErrorCode

logger = logging.getLogger("vidtube.ownership")


class Owned(Protocol):
    id: str
    owner_id: str


OwnedT = TypeVar("OwnedT", bound=Owned)


def is_owner(resource_owner_id: str, caller_id: str | None) -> bool:
    return caller_id is not None and str(resource_owner_id) == str(caller_id)


def authorize(resource_owner_id: str, caller_id: str | None) -> None:
    """Raise PERMISSION_DENIED unless the caller owns the resource."""
    if not is_owner(resource_owner_id, caller_id):
        logger.info("ownership denied: owner=%s caller=%s", resource_owner_id, caller_id)
        raise BusinessError(ErrorCode.PERMISSION_DENIED)


async def get_owned(
    db: AsyncSession,
    model: type[OwnedT],
    resource_id: str,
    caller_id: str,
    not_found: ErrorCode,
) -> OwnedT:
    """Load a resource for mutation: NotFound first, then the ownership check."""
    result = await db.execute(select(model).where(model.id == resource_id))
    resource = result.scalar_one_or_none()
    if resource is None:
        raise BusinessError(not_found)
    authorize(resource.owner_id, caller_id)
    return resource
