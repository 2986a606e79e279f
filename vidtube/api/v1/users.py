from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user_id, get_db, get_media_service
from vidtube.api.uploads import stage_upload
from vidtube.core.response import success
from vidtube.schemas.user import (
    AccountUpdateRequest,
    ChangePasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
)
from vidtube.services.auth_service import AuthService
from vidtube.services.media_service import MediaService
from vidtube.services.user_service import UserService
from vidtube.services.views import VideoViews

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register")
async def register(
    fullname: Optional[str] = Form(default=None),
    email: Optional[str] = Form(default=None),
    username: Optional[str] = Form(default=None),
    password: Optional[str] = Form(default=None),
    avatar: Optional[UploadFile] = File(default=None),
    cover_image: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
) -> JSONResponse:
    user = await UserService.register(
        db,
        media,
        username=username,
        email=email,
        fullname=fullname,
        password=password,
        avatar_path=await stage_upload(avatar),
        cover_image_path=await stage_upload(cover_image),
    )
    return success(data=jsonable_encoder(user), status_code=201)


@router.post("/login")
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)) -> JSONResponse:
    tokens = await AuthService.login(
        db, data.password, username=data.username, email=data.email
    )
    return success(data=jsonable_encoder(tokens))


@router.post("/logout")
async def logout(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    await AuthService.logout(db, user_id)
    return success()


@router.post("/refresh-token")
async def refresh_token(
    data: RefreshTokenRequest, db: AsyncSession = Depends(get_db)
) -> JSONResponse:
    tokens = await AuthService.refresh(db, data.refresh_token)
    return success(data=jsonable_encoder(tokens))


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    await AuthService.change_password(db, user_id, data.old_password, data.new_password)
    return success()


@router.get("/me")
async def get_me(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    user = await UserService.get_profile(db, user_id)
    return success(data=jsonable_encoder(user))


@router.patch("/me")
async def update_account(
    data: AccountUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    user = await UserService.update_account(
        db, user_id, fullname=data.fullname, email=data.email
    )
    return success(data=jsonable_encoder(user))


@router.patch("/me/avatar")
async def update_avatar(
    avatar: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    user = await UserService.update_avatar(db, media, user_id, await stage_upload(avatar))
    return success(data=jsonable_encoder(user))


@router.patch("/me/cover-image")
async def update_cover_image(
    cover_image: Optional[UploadFile] = File(default=None),
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    user = await UserService.update_cover_image(
        db, media, user_id, await stage_upload(cover_image)
    )
    return success(data=jsonable_encoder(user))


@router.get("/me/history")
async def watch_history(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    items = await VideoViews.watch_history(db, user_id)
    return success(data=jsonable_encoder(items))
