"""Scoring configuration routes."""

import logging
from fastapi import APIRouter, Depends, HTTPException

from ..middleware.auth import verify_signature
from ..schemas.lead import ErrorResponse, ScoringConfigUpdate
from ..services.scoring import ScoringService, get_scoring_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/scoring", tags=["scoring"], dependencies=[Depends(verify_signature)])


@router.get("/config")
async def get_config(service: ScoringService = Depends(get_scoring_service)):
    return service.get_configuration().to_dict()


@router.patch("/config", responses={400: {"model": ErrorResponse}})
async def update_config(
    update: ScoringConfigUpdate,
    service: ScoringService = Depends(get_scoring_service),
):
    """Merge a partial configuration into the live engine and persist it."""
    try:
        config = service.update_configuration(update)
    except (TypeError, ValueError) as e:
        raise HTTPException(
            status_code=400,
            detail={"success": False, "error": "validation_error", "detail": str(e)},
        )
    return config.to_dict()
