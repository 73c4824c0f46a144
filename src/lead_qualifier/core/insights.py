"""Follow-up insights derived from a lead's score breakdown."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from .models import Classification
from .scorer import ScoreResult


class InsightType(Enum):
    STRENGTH = "strength"
    OPPORTUNITY = "opportunity"
    RECOMMENDATION = "recommendation"


@dataclass
class ScoreInsight:
    """A short, prospect-facing observation about a score."""

    type: InsightType
    title: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type.value, "title": self.title, "description": self.description}


STRONG_COMPONENT_SCORE = 80
WEAK_TECH_SCORE = 60


def generate_insights(result: ScoreResult) -> List[ScoreInsight]:
    """Strengths first, then opportunities, then a tier recommendation."""
    insights: List[ScoreInsight] = []

    if result.budget_score >= STRONG_COMPONENT_SCORE:
        insights.append(ScoreInsight(
            InsightType.STRENGTH,
            "Strong Budget Alignment",
            "Your budget range indicates excellent project feasibility.",
        ))

    if result.timeline_score >= STRONG_COMPONENT_SCORE:
        insights.append(ScoreInsight(
            InsightType.STRENGTH,
            "Urgent Timeline",
            "Your immediate timeline allows for rapid implementation.",
        ))

    if result.pain_point_score >= STRONG_COMPONENT_SCORE:
        insights.append(ScoreInsight(
            InsightType.STRENGTH,
            "Clear Pain Points",
            "Well-defined challenges enable targeted solutions.",
        ))

    if result.tech_compatibility_score < WEAK_TECH_SCORE:
        insights.append(ScoreInsight(
            InsightType.OPPORTUNITY,
            "Technology Modernization",
            "Upgrading your tech stack could unlock significant value.",
        ))

    if result.classification == Classification.HOT:
        insights.append(ScoreInsight(
            InsightType.RECOMMENDATION,
            "Priority Consultation",
            "Schedule a strategy session with our senior team immediately.",
        ))
    elif result.classification == Classification.WARM:
        insights.append(ScoreInsight(
            InsightType.RECOMMENDATION,
            "Detailed Proposal",
            "We recommend a comprehensive consultation to explore opportunities.",
        ))

    return insights
