from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from vidtube.core.validators import optional_text, require_any, require_text
from vidtube.i18n.codes import ErrorCode
from vidtube.models.user import User
from vidtube.schemas.user import TokenResponse, UserProfileResponse

logger = logging.getLogger("vidtube.auth_service")


async def _issue_tokens(db: AsyncSession, user: User) -> TokenResponse:
    """Mint a token pair; the refresh token replaces any previously stored one."""
    access_token = create_access_token(user.id, user.username, user.email)
    refresh_token = create_refresh_token(user.id)
    user.refresh_token = refresh_token
    await db.commit()
    await db.refresh(user)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserProfileResponse.model_validate(user),
    )


class AuthService:
    @staticmethod
    async def login(
        db: AsyncSession,
        password: Optional[str],
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> TokenResponse:
        username = optional_text(username)
        email = optional_text(email)
        require_any("username or email", username, email)
        password = require_text(password, "password")

        criteria = []
        if username:
            criteria.append(User.username == username.lower())
        if email:
            criteria.append(User.email == email.lower())
        result = await db.execute(select(User).where(or_(*criteria)))
        user = result.scalars().first()
        if user is None:
            raise BusinessError(ErrorCode.USER_NOT_FOUND)
        if not verify_password(password, user.password):
            logger.info("login rejected: user_id=%s", user.id)
            raise BusinessError(ErrorCode.INVALID_CREDENTIALS)

        logger.info("user logged in: user_id=%s", user.id)
        return await _issue_tokens(db, user)

    @staticmethod
    async def refresh(db: AsyncSession, refresh_token: Optional[str]) -> TokenResponse:
        """Rotate the refresh token; only the most recently issued one is accepted."""
        token = require_text(refresh_token, "refresh_token")
        payload = decode_refresh_token(token)
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise BusinessError(ErrorCode.AUTH_TOKEN_INVALID)
        user = await db.get(User, subject)
        if user is None or user.refresh_token != token:
            raise BusinessError(ErrorCode.AUTH_TOKEN_INVALID)
        return await _issue_tokens(db, user)

    @staticmethod
    async def logout(db: AsyncSession, user_id: str) -> None:
        user = await db.get(User, user_id)
        if user is None:
            raise BusinessError(ErrorCode.USER_NOT_FOUND)
        user.refresh_token = None
        await db.commit()
        logger.info("user logged out: user_id=%s", user_id)

    @staticmethod
    async def change_password(
        db: AsyncSession,
        user_id: str,
        old_password: Optional[str],
        new_password: Optional[str],
    ) -> None:
        old_password = require_text(old_password, "old_password")
        new_password = require_text(new_password, "new_password")
        user = await db.get(User, user_id)
        if user is None:
            raise BusinessError(ErrorCode.USER_NOT_FOUND)
        if not verify_password(old_password, user.password):
            raise BusinessError(ErrorCode.INVALID_CREDENTIALS)
        user.password = hash_password(new_password)
        await db.commit()
        logger.info("password changed: user_id=%s", user_id)
