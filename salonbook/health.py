# salonbook/health.py
from fastapi import APIRouter

from salonbook.config import get_settings

router = APIRouter()


@router.get("/health")
def health():
    settings = get_settings()
    return {"status": "ok", "mock_data": settings.use_mock_data}


@router.get("/mcp/info")
def mcp_info():
    return {"status": "ok", "transport": "streamable-http", "path": "/mcp"}


@router.get("/mcp/health")
def mcp_health():
    return {"ok": True}
