"""
Health check endpoint
"""
from fastapi import APIRouter
from staffdesk.core.constants import SERVICE_NAME

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness check"""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
    }
