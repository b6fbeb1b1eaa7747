# aspas/api/routers/health.py
from fastapi import APIRouter

from aspas.core.security import iso_utc, utc_now

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "ok", "timestamp": iso_utc(utc_now())}
