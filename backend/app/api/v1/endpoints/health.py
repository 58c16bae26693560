from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health():
    return {
        "success": True,
        "message": "Blood bank API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
