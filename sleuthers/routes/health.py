"""
Module routes/health.py
Rôle:
- Endpoint de santé (service OK + nom configuré).
"""
from fastapi import APIRouter

from sleuthers.config.settings import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health():
    """Renvoie un OK minimal avec le nom de service configuré."""
    return {"ok": True, "service": settings.APP_NAME}
