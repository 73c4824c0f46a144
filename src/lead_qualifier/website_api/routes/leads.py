"""Lead scoring routes."""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from ...core.models import Classification
from ..middleware.auth import verify_signature
from ..schemas.lead import ErrorResponse, LeadScoreRequest, LeadScoreResponse
from ..services.scoring import ScoringService, get_scoring_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/leads", tags=["leads"], dependencies=[Depends(verify_signature)])


@router.post(
    "/score",
    response_model=LeadScoreResponse,
    responses={
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def score_lead(
    request: LeadScoreRequest,
    service: ScoringService = Depends(get_scoring_service),
):
    """Score an intake form submission.

    Uses the engagement history from the request body when given, otherwise
    whatever has been tracked for the lead.
    """
    try:
        result, insights = service.score_lead(request)
    except Exception:
        logger.exception("Lead scoring error")
        raise HTTPException(
            status_code=500,
            detail={"success": False, "error": "server_error", "detail": "Internal processing error"},
        )

    return LeadScoreResponse(
        success=True,
        lead_id=result.lead_id,
        score=result.to_dict(),
        insights=[i.to_dict() for i in insights],
        message=f"Lead classified as {result.classification.value}",
    )


@router.get("/scores")
async def list_scores(
    classification: Optional[Classification] = None,
    min_score: Optional[int] = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: ScoringService = Depends(get_scoring_service),
):
    """List stored scores, highest first."""
    results = service.list_scores(classification, min_score=min_score, limit=limit, offset=offset)
    return {"scores": [r.to_dict() for r in results], "count": len(results)}


@router.get("/{lead_id}/score", responses={404: {"model": ErrorResponse}})
async def get_score(lead_id: str, service: ScoringService = Depends(get_scoring_service)):
    """Latest stored score for a lead."""
    result = service.get_latest_score(lead_id)
    if result is None:
        raise HTTPException(
            status_code=404,
            detail={"success": False, "error": "not_found", "detail": f"No score for lead {lead_id}"},
        )
    return result.to_dict()
