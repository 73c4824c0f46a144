"""Core scoring engine for lead qualification."""

from .models import (
    BudgetRange,
    Classification,
    CompanySize,
    Division,
    EmailAction,
    EmailInteraction,
    EngagementHistory,
    IntakeRecord,
    MarketType,
    PageView,
    PreviousExperience,
    Timeline,
)
from .config import ScoringConfig, ScoringConfigManager, ScoringThresholds, ScoringWeights
from .scorer import LeadScoringEngine, ScoreFactor, ScoreResult, quick_score
from .insights import InsightType, ScoreInsight, generate_insights

__all__ = [
    "BudgetRange",
    "Classification",
    "CompanySize",
    "Division",
    "EmailAction",
    "EmailInteraction",
    "EngagementHistory",
    "IntakeRecord",
    "MarketType",
    "PageView",
    "PreviousExperience",
    "Timeline",
    "ScoringConfig",
    "ScoringConfigManager",
    "ScoringThresholds",
    "ScoringWeights",
    "LeadScoringEngine",
    "ScoreFactor",
    "ScoreResult",
    "quick_score",
    "InsightType",
    "ScoreInsight",
    "generate_insights",
]
