"""Health check endpoints."""

from fastapi import APIRouter

from api import __version__

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
async def health() -> dict[str, str]:
    """Report service health."""
    return {"status": "healthy", "version": __version__}
