from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.exceptions import BusinessError
from vidtube.core.security import hash_password
from vidtube.core.validators import optional_text, require_any, require_text
from vidtube.i18n.codes import ErrorCode
from vidtube.models.user import User
from vidtube.schemas.user import UserProfileResponse
from vidtube.services.media_service import MediaKind, MediaService, PathLike, UploadedMedia

logger = logging.getLogger("vidtube.user_service")


async def _get_user(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise BusinessError(ErrorCode.USER_NOT_FOUND)
    return user


class UserService:
    @staticmethod
    async def register(
        db: AsyncSession,
        media: MediaService,
        username: Optional[str],
        email: Optional[str],
        fullname: Optional[str],
        password: Optional[str],
        avatar_path: Optional[PathLike],
        cover_image_path: Optional[PathLike] = None,
    ) -> UserProfileResponse:
        try:
            username = require_text(username, "username").lower()
            email = require_text(email, "email").lower()
            fullname = require_text(fullname, "fullname")
            password = require_text(password, "password")
            if not avatar_path:
                raise BusinessError(ErrorCode.MISSING_REQUIRED_PARAMETER, field="avatar")
            existing = await db.scalar(
                select(User.id).where(or_(User.username == username, User.email == email))
            )
            if existing is not None:
                raise BusinessError(ErrorCode.USER_ALREADY_EXISTS)
        except BusinessError:
            media.discard(avatar_path, cover_image_path)
            raise

        try:
            avatar = await media.upload(avatar_path, "avatars", MediaKind.IMAGE, field="avatar")
        except BusinessError:
            media.discard(cover_image_path)
            raise
        cover_image: Optional[UploadedMedia] = None
        if cover_image_path:
            try:
                cover_image = await media.upload(
                    cover_image_path, "covers", MediaKind.IMAGE, field="cover_image"
                )
            except BusinessError:
                await media.delete_quietly(avatar.public_id)
                raise

        user = User(
            username=username,
            email=email,
            fullname=fullname,
            password=hash_password(password),
            avatar=avatar.url,
            avatar_key=avatar.public_id,
            cover_image=cover_image.url if cover_image else None,
            cover_image_key=cover_image.public_id if cover_image else None,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            logger.warning("user registration conflict: username=%s", username)
            await media.delete_quietly(
                avatar.public_id, cover_image.public_id if cover_image else None
            )
            raise BusinessError(ErrorCode.USER_ALREADY_EXISTS) from exc
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.exception("user registration failed: username=%s", username)
            await media.delete_quietly(
                avatar.public_id, cover_image.public_id if cover_image else None
            )
            raise BusinessError(ErrorCode.SYSTEM_ERROR) from exc

        await db.refresh(user)
        logger.info("user registered: user_id=%s", user.id)
        return UserProfileResponse.model_validate(user)

    @staticmethod
    async def get_profile(db: AsyncSession, user_id: str) -> UserProfileResponse:
        return UserProfileResponse.model_validate(await _get_user(db, user_id))

    @staticmethod
    async def update_account(
        db: AsyncSession,
        user_id: str,
        fullname: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserProfileResponse:
        fullname = optional_text(fullname)
        email = optional_text(email)
        require_any("fullname or email", fullname, email)
        user = await _get_user(db, user_id)

        if email:
            email = email.lower()
            taken = await db.scalar(select(User.id).where(User.email == email, User.id != user_id))
            if taken is not None:
                raise BusinessError(ErrorCode.USER_ALREADY_EXISTS)
            user.email = email
        if fullname:
            user.fullname = fullname

        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            raise BusinessError(ErrorCode.USER_ALREADY_EXISTS) from exc
        await db.refresh(user)
        return UserProfileResponse.model_validate(user)

    @staticmethod
    async def update_avatar(
        db: AsyncSession,
        media: MediaService,
        user_id: str,
        avatar_path: Optional[PathLike],
    ) -> UserProfileResponse:
        return await _replace_image(db, media, user_id, avatar_path, "avatar", "avatars")

    @staticmethod
    async def update_cover_image(
        db: AsyncSession,
        media: MediaService,
        user_id: str,
        cover_image_path: Optional[PathLike],
    ) -> UserProfileResponse:
        return await _replace_image(db, media, user_id, cover_image_path, "cover_image", "covers")


async def _replace_image(
    db: AsyncSession,
    media: MediaService,
    user_id: str,
    local_path: Optional[PathLike],
    field: str,
    folder: str,
) -> UserProfileResponse:
    """Upload the new image, persist it, then drop the previous object."""
    if not local_path:
        raise BusinessError(ErrorCode.MISSING_REQUIRED_PARAMETER, field=field)
    try:
        user = await _get_user(db, user_id)
    except BusinessError:
        media.discard(local_path)
        raise

    uploaded = await media.upload(local_path, folder, MediaKind.IMAGE, field=field)
    previous = getattr(user, f"{field}_key")
    setattr(user, field, uploaded.url)
    setattr(user, f"{field}_key", uploaded.public_id)
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("%s update failed: user_id=%s", field, user_id)
        await media.delete_quietly(uploaded.public_id)
        raise BusinessError(ErrorCode.SYSTEM_ERROR) from exc

    await db.refresh(user)
    await media.delete_quietly(previous)
    logger.info("%s updated: user_id=%s", field, user_id)
    return UserProfileResponse.model_validate(user)
