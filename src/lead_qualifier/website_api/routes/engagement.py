"""Engagement tracking routes."""

from fastapi import APIRouter, Depends

from ..middleware.auth import verify_signature
from ..schemas.lead import EmailInteractionPayload, PageViewPayload
from ..services.scoring import ScoringService, get_scoring_service

router = APIRouter(prefix="/v1/engagement", tags=["engagement"], dependencies=[Depends(verify_signature)])


@router.post("/{lead_id}/page-views", status_code=201)
async def record_page_view(
    lead_id: str,
    payload: PageViewPayload,
    service: ScoringService = Depends(get_scoring_service),
):
    service.record_page_view(lead_id, payload)
    return service.engagement_summary(lead_id)


@router.post("/{lead_id}/emails", status_code=201)
async def record_email_interaction(
    lead_id: str,
    payload: EmailInteractionPayload,
    service: ScoringService = Depends(get_scoring_service),
):
    service.record_email_interaction(lead_id, payload)
    return service.engagement_summary(lead_id)


@router.get("/{lead_id}")
async def get_engagement(lead_id: str, service: ScoringService = Depends(get_scoring_service)):
    return service.engagement_summary(lead_id)
