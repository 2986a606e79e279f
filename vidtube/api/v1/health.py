from fastapi import APIRouter
from fastapi.responses import JSONResponse

from vidtube.core.response import success

router = APIRouter()


@router.get("/health")
async def health() -> JSONResponse:
    return success(data={"status": "ok"})
