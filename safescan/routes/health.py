from datetime import datetime, timezone

from fastapi import APIRouter

from safescan.config import APP_ENV

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    return {
        "message": "Emergency Medical QR System API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": APP_ENV,
    }
