"""Scoring service for the API routes."""

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ...core.config import ScoringConfig, ScoringConfigManager
from ...core.insights import ScoreInsight, generate_insights
from ...core.models import Classification, EngagementHistory, IntakeRecord
from ...core.scorer import LeadScoringEngine, ScoreResult
from ...storage.database import ScoreDatabase
from ...tracking.engagement import EngagementTracker
from ..config import settings
from ..schemas.lead import (
    EmailInteractionPayload,
    LeadScoreRequest,
    PageViewPayload,
    ScoringConfigUpdate,
)

logger = logging.getLogger(__name__)


class ScoringService:
    """Glue between HTTP payloads, the scoring engine and storage."""

    def __init__(
        self,
        db: ScoreDatabase,
        config_manager: ScoringConfigManager,
        tracker: Optional[EngagementTracker] = None,
    ):
        self.db = db
        self.config_manager = config_manager
        self.tracker = tracker or EngagementTracker()
        self.engine = config_manager.build_engine()

    def score_lead(self, request: LeadScoreRequest) -> Tuple[ScoreResult, List[ScoreInsight]]:
        """Build an intake record from the request, score it and store it."""
        lead_id = request.lead_id or str(uuid.uuid4())
        intake = IntakeRecord.from_dict(request.intake.model_dump())

        if request.engagement is not None:
            engagement = EngagementHistory.from_dict(request.engagement.model_dump())
        else:
            engagement = self.tracker.get_history(lead_id)

        result = self.engine.compute(intake, engagement)
        result.lead_id = lead_id

        if request.save:
            self.db.save_score(result)

        logger.info(
            f"Scored lead {lead_id}: {result.total_score} "
            f"({result.classification.value}, confidence {result.confidence})"
        )
        return result, generate_insights(result)

    def get_latest_score(self, lead_id: str) -> Optional[ScoreResult]:
        return self.db.get_latest_score(lead_id)

    def list_scores(
        self,
        classification: Optional[Classification] = None,
        min_score: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[ScoreResult]:
        return self.db.list_scores(classification, min_score=min_score, limit=limit, offset=offset)

    def record_page_view(self, lead_id: str, payload: PageViewPayload):
        return self.tracker.record_page_view(
            lead_id,
            url=payload.url,
            time_on_page=payload.time_on_page,
            timestamp=payload.timestamp,
            referrer=payload.referrer or "",
            source=payload.source or "",
            campaign=payload.campaign or "",
        )

    def record_email_interaction(self, lead_id: str, payload: EmailInteractionPayload):
        return self.tracker.record_email_interaction(
            lead_id,
            action=payload.action,
            campaign_id=payload.campaign_id or "",
            step_id=payload.step_id or "",
            timestamp=payload.timestamp,
        )

    def engagement_summary(self, lead_id: str) -> Dict[str, Any]:
        history = self.tracker.get_history(lead_id)
        if history is None:
            return {"lead_id": lead_id, "page_views": 0, "email_interactions": 0, "time_on_site": 0}
        return {
            "lead_id": lead_id,
            "page_views": len(history.page_views),
            "email_interactions": len(history.email_interactions),
            "time_on_site": history.total_time_on_site,
        }

    def get_configuration(self) -> ScoringConfig:
        return self.engine.get_configuration()

    def update_configuration(self, update: ScoringConfigUpdate) -> ScoringConfig:
        """Apply a partial update to the engine and persist it."""
        partial = update.model_dump(exclude_none=True)
        config = self.config_manager.update(partial)
        self.engine.update_configuration(config)
        return config


_service: Optional[ScoringService] = None


def get_scoring_service() -> ScoringService:
    """FastAPI dependency returning the process-wide service."""
    global _service
    if _service is None:
        _service = ScoringService(
            db=ScoreDatabase(Path(settings.db_path)),
            config_manager=ScoringConfigManager(Path(settings.scoring_config_path)),
            tracker=EngagementTracker(settings.engagement_path),
        )
    return _service
