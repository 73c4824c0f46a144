"""Lead qualification scoring engine - weighted multi-factor model."""

import logging
import math
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from . import rules
from .config import ScoringConfig, merge_config
from .models import (
    BudgetRange,
    Classification,
    CompanySize,
    EngagementHistory,
    IntakeRecord,
    Timeline,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return min(high, max(low, value))


@dataclass
class ScoreFactor:
    """One signal's contribution to the total score."""

    category: str
    factor: str
    weight: float
    value: float
    impact: float
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "factor": self.factor,
            "weight": self.weight,
            "value": self.value,
            "impact": self.impact,
            "reason": self.reason,
        }


@dataclass
class ScoreResult:
    """Result of scoring a lead's intake data."""

    total_score: int
    classification: Classification
    confidence: int
    company_score: float
    budget_score: float
    timeline_score: float
    pain_point_score: float
    tech_compatibility_score: float
    engagement_score: float
    version: str
    factors: List[ScoreFactor] = field(default_factory=list)
    completeness: float = 0.0
    consistency: float = 100.0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    lead_id: str = ""  # Set by caller
    calculated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_qualified(self) -> bool:
        """Hot and warm leads go straight to sales."""
        return self.classification in (Classification.HOT, Classification.WARM)

    @property
    def component_scores(self) -> Dict[str, float]:
        return {
            "company": self.company_score,
            "budget": self.budget_score,
            "timeline": self.timeline_score,
            "pain_points": self.pain_point_score,
            "tech_compatibility": self.tech_compatibility_score,
            "engagement": self.engagement_score,
        }

    @property
    def summary(self) -> str:
        """Get a human-readable summary of the top contributing factors."""
        if not self.factors:
            return "No scoring factors recorded"

        parts = []
        for factor in sorted(self.factors, key=lambda f: f.impact, reverse=True)[:3]:
            parts.append(f"{factor.factor} (+{factor.impact:.1f})")

        return ", ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lead_id": self.lead_id,
            "total_score": self.total_score,
            "classification": self.classification.value,
            "confidence": self.confidence,
            "company_score": self.company_score,
            "budget_score": self.budget_score,
            "timeline_score": self.timeline_score,
            "pain_point_score": self.pain_point_score,
            "tech_compatibility_score": self.tech_compatibility_score,
            "engagement_score": self.engagement_score,
            "completeness": self.completeness,
            "consistency": self.consistency,
            "calculated_at": self.calculated_at.isoformat(),
            "version": self.version,
            "factors": [f.to_dict() for f in self.factors],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoreResult":
        return cls(
            id=data["id"],
            lead_id=data.get("lead_id", ""),
            total_score=data["total_score"],
            classification=Classification(data["classification"]),
            confidence=data["confidence"],
            company_score=data["company_score"],
            budget_score=data["budget_score"],
            timeline_score=data["timeline_score"],
            pain_point_score=data["pain_point_score"],
            tech_compatibility_score=data["tech_compatibility_score"],
            engagement_score=data["engagement_score"],
            completeness=data.get("completeness", 0.0),
            consistency=data.get("consistency", 100.0),
            calculated_at=datetime.fromisoformat(data["calculated_at"]),
            version=data.get("version", ""),
            factors=[ScoreFactor(**f) for f in data.get("factors", [])],
        )


def _normalized_urgency(value: Any) -> int:
    """Urgency as an int in 1-5; missing or malformed values are neutral."""
    if isinstance(value, bool):
        return rules.NEUTRAL_URGENCY
    try:
        urgency = int(value)
    except (TypeError, ValueError):
        return rules.NEUTRAL_URGENCY
    return int(_clamp(urgency, rules.MIN_URGENCY, rules.MAX_URGENCY))


def _label(value: Any) -> str:
    if value is None or value == "":
        return "unspecified"
    return getattr(value, "value", str(value))


def _contains_any(text: str, keywords: List[str]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


class LeadScoringEngine:
    """Scores leads from intake data and optional engagement history."""

    def __init__(self, config: Union[ScoringConfig, Mapping[str, Any], None] = None):
        """Initialize with an optional full or partial configuration."""
        self._config = merge_config(ScoringConfig(), config)
        self._lock = threading.Lock()

    def get_configuration(self) -> ScoringConfig:
        """Return the current configuration.

        The value is immutable, so callers cannot change engine state through it.
        """
        return self._config

    def update_configuration(self, partial: Union[ScoringConfig, Mapping[str, Any]]) -> None:
        """Merge ``partial`` into the current configuration (see ``merge_config``)."""
        with self._lock:
            self._config = merge_config(self._config, partial)
            config = self._config

        logger.info(f"Scoring configuration updated (version {config.version})")
        if not math.isclose(config.weights.total, 1.0, abs_tol=1e-6):
            logger.warning(
                f"Scoring weights sum to {config.weights.total:.3f}, not 1.0; "
                "composite scores will not span 0-100"
            )

    def compute(
        self,
        intake: IntakeRecord,
        engagement: Optional[EngagementHistory] = None,
        config: Optional[ScoringConfig] = None,
    ) -> ScoreResult:
        """Score a lead.

        Reads the configuration once, so a concurrent update never produces a
        mixed view. An explicit ``config`` applies to this call only.
        """
        config = config or self._config
        weights = config.weights
        factors: List[ScoreFactor] = []

        company_score = self._company_score(intake, weights.company_size, factors)
        budget_score = self._budget_score(intake, weights.budget, factors)
        timeline_score = self._timeline_score(intake, weights.timeline, factors)
        pain_point_score = self._pain_point_score(intake, weights.pain_points, factors)
        tech_score = self._tech_compatibility_score(intake, weights.tech_compatibility, factors)
        engagement_score = self._engagement_score(engagement, weights.engagement, factors)

        total_score = round_half_up(
            company_score * weights.company_size
            + budget_score * weights.budget
            + timeline_score * weights.timeline
            + pain_point_score * weights.pain_points
            + tech_score * weights.tech_compatibility
            + engagement_score * weights.engagement
        )

        classification = self.classify(total_score, config)
        completeness = self._completeness(intake)
        consistency = self._consistency(intake)
        confidence = int(_clamp(round_half_up(
            completeness * rules.COMPLETENESS_WEIGHT
            + consistency * rules.CONSISTENCY_WEIGHT
        )))

        result = ScoreResult(
            total_score=total_score,
            classification=classification,
            confidence=confidence,
            company_score=company_score,
            budget_score=budget_score,
            timeline_score=timeline_score,
            pain_point_score=pain_point_score,
            tech_compatibility_score=tech_score,
            engagement_score=engagement_score,
            version=config.version,
            factors=factors,
            completeness=completeness,
            consistency=consistency,
        )

        logger.debug(
            f"Scored lead: {total_score} ({classification.value}), confidence {confidence}"
        )
        return result

    @staticmethod
    def classify(score: float, config: ScoringConfig) -> Classification:
        """First threshold met wins, evaluated from hot down."""
        thresholds = config.thresholds
        if score >= thresholds.hot:
            return Classification.HOT
        if score >= thresholds.warm:
            return Classification.WARM
        if score >= thresholds.cold:
            return Classification.COLD
        return Classification.NURTURE

    # === SUB-SCORES ===

    def _company_score(self, intake: IntakeRecord, weight: float, factors: List[ScoreFactor]) -> float:
        size = CompanySize.parse(intake.company_size)
        score = rules.COMPANY_SIZE_SCORES.get(size, rules.COMPANY_BASE_SCORE)

        factors.append(ScoreFactor(
            category="Company",
            factor="Company Size",
            weight=weight,
            value=score,
            impact=score * weight,
            reason=f"{_label(intake.company_size)} companies typically have higher success rates",
        ))

        industry = intake.industry if isinstance(intake.industry, str) else ""
        if industry and _contains_any(industry, rules.HIGH_VALUE_INDUSTRIES):
            score = min(100, score + rules.INDUSTRY_BONUS)
            factors.append(ScoreFactor(
                category="Company",
                factor="Industry Vertical",
                weight=rules.INDUSTRY_FACTOR_WEIGHT,
                value=rules.INDUSTRY_BONUS,
                impact=rules.INDUSTRY_BONUS * rules.INDUSTRY_FACTOR_WEIGHT,
                reason=f"{industry} is a high-value industry vertical",
            ))

        return _clamp(score)

    def _budget_score(self, intake: IntakeRecord, weight: float, factors: List[ScoreFactor]) -> float:
        budget = BudgetRange.parse(intake.budget)
        score = rules.BUDGET_SCORES.get(budget, rules.BUDGET_FALLBACK_SCORE)

        factors.append(ScoreFactor(
            category="Budget",
            factor="Budget Range",
            weight=weight,
            value=score,
            impact=score * weight,
            reason=f"{_label(intake.budget)} budget range indicates strong purchasing power",
        ))

        return score

    def _timeline_score(self, intake: IntakeRecord, weight: float, factors: List[ScoreFactor]) -> float:
        timeline = Timeline.parse(intake.timeline)
        urgency = _normalized_urgency(intake.urgency)
        base = rules.TIMELINE_SCORES.get(timeline, rules.TIMELINE_FALLBACK_SCORE)

        multiplier = 1 + (urgency - rules.NEUTRAL_URGENCY) * rules.URGENCY_STEP
        score = min(100, base * multiplier)

        factors.append(ScoreFactor(
            category="Timeline",
            factor="Project Timeline",
            weight=weight,
            value=score,
            impact=score * weight,
            reason=f"{_label(intake.timeline)} timeline with urgency {urgency}/5",
        ))

        return round_half_up(_clamp(score))

    def _pain_point_score(self, intake: IntakeRecord, weight: float, factors: List[ScoreFactor]) -> float:
        pain_points = [p for p in (intake.pain_points or []) if isinstance(p, str)]

        if not pain_points:
            score = rules.NO_PAIN_POINTS_SCORE
            factors.append(ScoreFactor(
                category="Pain Points",
                factor="Pain Point Identification",
                weight=weight,
                value=score,
                impact=score * weight,
                reason="No specific pain points identified",
            ))
            return score

        score = rules.PAIN_POINT_BASE_SCORE

        severities = [
            value for value in (intake.pain_point_severity or {}).values()
            if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
        ]
        if severities:
            score += (sum(severities) / len(severities)) * rules.SEVERITY_MULTIPLIER

        high_impact_count = sum(
            1 for pain_point in pain_points
            if _contains_any(pain_point, rules.HIGH_IMPACT_PAIN_POINTS)
        )
        score += high_impact_count * rules.HIGH_IMPACT_BONUS

        score = _clamp(score)
        factors.append(ScoreFactor(
            category="Pain Points",
            factor="Pain Point Analysis",
            weight=weight,
            value=score,
            impact=score * weight,
            reason=f"{len(pain_points)} pain points identified, {high_impact_count} high-impact",
        ))

        return score

    def _tech_compatibility_score(self, intake: IntakeRecord, weight: float, factors: List[ScoreFactor]) -> float:
        tech_stack = [t.lower() for t in (intake.current_tech or []) if isinstance(t, str)]

        if not tech_stack:
            score = rules.NO_TECH_SCORE
            factors.append(ScoreFactor(
                category="Technology",
                factor="Tech Stack Compatibility",
                weight=weight,
                value=score,
                impact=score * weight,
                reason="No current technology stack specified",
            ))
            return score

        score = rules.TECH_BASE_SCORE
        compatibility_level = "none"

        # Tiers are scored independently; the label keeps the first tier hit
        for level, bonus, keywords in rules.TECH_COMPATIBILITY_TIERS:
            match_count = sum(
                1 for keyword in keywords
                if any(keyword in tech for tech in tech_stack)
            )
            if match_count:
                score += match_count * bonus
                if compatibility_level == "none":
                    compatibility_level = level

        score = _clamp(score)
        factors.append(ScoreFactor(
            category="Technology",
            factor="Tech Stack Compatibility",
            weight=weight,
            value=score,
            impact=score * weight,
            reason=f"{compatibility_level} compatibility with {len(tech_stack)} technologies",
        ))

        return score

    def _engagement_score(
        self,
        engagement: Optional[EngagementHistory],
        weight: float,
        factors: List[ScoreFactor],
    ) -> float:
        if engagement is None:
            score = rules.NO_ENGAGEMENT_SCORE
            factors.append(ScoreFactor(
                category="Engagement",
                factor="User Engagement",
                weight=weight,
                value=score,
                impact=score * weight,
                reason="No engagement data available",
            ))
            return score

        page_views = list(engagement.page_views or [])
        email_interactions = list(engagement.email_interactions or [])
        total_time = sum(max(0, pv.time_on_page or 0) for pv in page_views)

        score = (
            min(rules.PAGE_VIEW_CAP, len(page_views) * rules.PAGE_VIEW_POINTS)
            + min(rules.EMAIL_INTERACTION_CAP, len(email_interactions) * rules.EMAIL_INTERACTION_POINTS)
            + min(rules.TIME_ON_SITE_CAP, total_time / rules.SECONDS_PER_TIME_POINT)
        )
        score = _clamp(score)

        factors.append(ScoreFactor(
            category="Engagement",
            factor="User Engagement",
            weight=weight,
            value=score,
            impact=score * weight,
            reason=f"{len(page_views)} page views, {len(email_interactions)} email interactions",
        ))

        return score

    # === CONFIDENCE ===

    def _completeness(self, intake: IntakeRecord) -> float:
        """Share of the twelve key intake fields that were filled in, 0-100."""
        checks = [
            intake.first_name,
            intake.email,
            intake.company,
            intake.position,
            intake.division,
            intake.services,
            intake.company_size,
            intake.industry,
            intake.budget,
            intake.timeline,
            intake.pain_points,
            intake.project_description,
        ]
        filled = sum(1 for value in checks if value)
        return (filled / rules.CONFIDENCE_FIELD_COUNT) * 100

    def _consistency(self, intake: IntakeRecord) -> float:
        """Start at 100 and subtract for contradictory answers."""
        size = CompanySize.parse(intake.company_size)
        budget = BudgetRange.parse(intake.budget)
        timeline = Timeline.parse(intake.timeline)
        urgency = _normalized_urgency(intake.urgency)

        score = 100

        if size == CompanySize.STARTUP and budget in rules.STARTUP_IMPLAUSIBLE_BUDGETS:
            score -= rules.STARTUP_LARGE_BUDGET_PENALTY

        if size == CompanySize.ENTERPRISE and budget == BudgetRange.UNDER_10K:
            score -= rules.ENTERPRISE_SMALL_BUDGET_PENALTY

        if timeline == Timeline.WITHIN_YEAR and urgency >= 4:
            score -= rules.TIMELINE_URGENCY_PENALTY

        if timeline == Timeline.IMMEDIATE and urgency <= 2:
            score -= rules.TIMELINE_URGENCY_PENALTY

        return max(0, score)

    def explain_score(self, result: ScoreResult) -> str:
        """Get a detailed explanation of a scoring result."""
        lines = [
            f"Total Score: {result.total_score} ({result.classification.value.upper()})",
            f"Confidence: {result.confidence}% "
            f"(completeness {result.completeness:.0f}, consistency {result.consistency:.0f})",
            "",
            "Factors:",
        ]

        if not result.factors:
            lines.append("  (none)")
        else:
            for factor in result.factors:
                lines.append(
                    f"  [{factor.category}] {factor.factor}: {factor.value:.0f} "
                    f"x {factor.weight:.2f} = {factor.impact:.1f} - {factor.reason}"
                )

        lines.extend(["", "Component Scores:"])
        for name, score in result.component_scores.items():
            lines.append(f"  {name}: {score:.0f}")

        return "\n".join(lines)


def quick_score(intake: IntakeRecord, engagement: Optional[EngagementHistory] = None) -> int:
    """Quick helper to score a lead and return just the total score."""
    engine = LeadScoringEngine()
    return engine.compute(intake, engagement).total_score
