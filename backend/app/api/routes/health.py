# app/api/routes/health.py
from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()

@router.get("/health")
async def health():
    return {"ok": True, "service": settings.PROJECT_NAME}
