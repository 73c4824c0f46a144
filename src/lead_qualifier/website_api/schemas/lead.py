"""Pydantic models for lead scoring request/response."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...core.models import EmailAction


class FormPayload(BaseModel):
    """Accepts both snake_case and the camelCase keys browser forms send."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IntakePayload(FormPayload):
    """Raw intake form submission.

    Categorical fields stay plain strings so unknown values reach the
    scorer's fallbacks instead of failing validation.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None

    division: Optional[str] = None
    services: List[str] = []

    company_size: Optional[str] = None
    industry: Optional[str] = None
    budget: Optional[str] = None
    timeline: Optional[str] = None
    urgency: Optional[int] = None

    current_tech: List[str] = []
    pain_points: List[str] = []
    pain_point_severity: Optional[Dict[str, float]] = None

    project_description: Optional[str] = None
    expected_outcomes: List[str] = []
    previous_experience: Optional[str] = None

    location: Optional[str] = None
    timezone: Optional[str] = None
    market_type: Optional[str] = None


class PageViewPayload(FormPayload):
    url: str
    timestamp: Optional[datetime] = None
    time_on_page: float = Field(0, ge=0, description="Seconds spent on the page")
    referrer: Optional[str] = None
    source: Optional[str] = None
    campaign: Optional[str] = None


class EmailInteractionPayload(FormPayload):
    action: EmailAction
    campaign_id: Optional[str] = None
    step_id: Optional[str] = None
    timestamp: Optional[datetime] = None


class EngagementPayload(FormPayload):
    page_views: List[PageViewPayload] = []
    email_interactions: List[EmailInteractionPayload] = []


class LeadScoreRequest(FormPayload):
    lead_id: Optional[str] = None
    intake: IntakePayload
    engagement: Optional[EngagementPayload] = Field(
        None,
        description="Engagement history; when omitted, tracked engagement for lead_id is used",
    )
    save: bool = True


class LeadScoreResponse(BaseModel):
    success: bool
    lead_id: str
    score: Dict[str, Any]
    insights: List[Dict[str, str]] = []
    message: str


class ScoringConfigUpdate(BaseModel):
    weights: Optional[Dict[str, float]] = None
    thresholds: Optional[Dict[str, float]] = None
    version: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    detail: str
