from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.deps import get_current_user_id, get_db
from vidtube.core.response import success
from vidtube.schemas.playlist import PlaylistCreateRequest, PlaylistUpdateRequest
from vidtube.services.playlist_service import PlaylistService
from vidtube.services.views import PlaylistViews

router = APIRouter(prefix="/playlists", tags=["playlists"])


@router.post("")
async def create_playlist(
    data: PlaylistCreateRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    playlist = await PlaylistService.create(db, user_id, data.name, data.description)
    return success(data=jsonable_encoder(playlist), status_code=201)


@router.get("/user/{user_id}")
async def list_user_playlists(
    user_id: str,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    items = await PlaylistViews.by_owner(db, user_id)
    return success(data=jsonable_encoder(items))


@router.patch("/add/{video_id}/{playlist_id}")
async def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    playlist = await PlaylistService.add_video(db, playlist_id, video_id, user_id)
    return success(data=jsonable_encoder(playlist))


@router.patch("/remove/{video_id}/{playlist_id}")
async def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    playlist = await PlaylistService.remove_video(db, playlist_id, video_id, user_id)
    return success(data=jsonable_encoder(playlist))


@router.get("/{playlist_id}")
async def get_playlist(
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
) -> JSONResponse:
    playlist = await PlaylistViews.get(db, playlist_id)
    return success(data=jsonable_encoder(playlist))


@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: str,
    data: PlaylistUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    playlist = await PlaylistService.update(
        db, playlist_id, user_id, name=data.name, description=data.description
    )
    return success(data=jsonable_encoder(playlist))


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> JSONResponse:
    await PlaylistService.delete(db, playlist_id, user_id)
    return success()
