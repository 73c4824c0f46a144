"""Health check routes."""

from fastapi import APIRouter, Depends

from ..services.scoring import ScoringService, get_scoring_service

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "healthy", "service": "lead-qualifier-api", "version": "1.0.0"}


@router.get("/ready")
async def ready(service: ScoringService = Depends(get_scoring_service)):
    """Readiness check - verifies the score database is accessible."""
    try:
        stats = service.db.get_stats()
    except Exception as e:
        return {"status": "not_ready", "detail": str(e)}
    return {"status": "ready", "scores": stats["total_scores"]}
