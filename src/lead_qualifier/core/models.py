"""Intake and engagement data models for lead qualification."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

# Raw form values that map onto a canonical enum value
_VALUE_ALIASES = {
    "500k+": "500k-plus",
}


class _ParsableEnum(str, Enum):
    """String enum that parses raw form values without raising."""

    @classmethod
    def parse(cls, value: Any):
        """Return the matching member, or None for unknown values."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        key = _VALUE_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        return None


class CompanySize(_ParsableEnum):
    """Self-reported company size."""

    STARTUP = "startup"
    SMALL = "small"
    MEDIUM = "medium"
    ENTERPRISE = "enterprise"


class BudgetRange(_ParsableEnum):
    """Project budget band."""

    UNDER_10K = "under-10k"
    FROM_10K_TO_50K = "10k-50k"
    FROM_50K_TO_100K = "50k-100k"
    FROM_100K_TO_500K = "100k-500k"
    OVER_500K = "500k-plus"


class Timeline(_ParsableEnum):
    """How soon the prospect wants to start."""

    IMMEDIATE = "immediate"
    WITHIN_MONTH = "within-month"
    WITHIN_QUARTER = "within-quarter"
    WITHIN_YEAR = "within-year"


class Division(_ParsableEnum):
    """Service division the inquiry was made through."""

    STRATEGY = "strategy"
    DIGITALWORKS = "digitalworks"
    LABS = "labs"
    STUDIO = "studio"
    AI = "ai"


class PreviousExperience(_ParsableEnum):
    """Prior experience with similar projects."""

    NONE = "none"
    SOME = "some"
    EXTENSIVE = "extensive"


class MarketType(_ParsableEnum):
    """Market reach of the prospect's business."""

    LOCAL = "local"
    NATIONAL = "national"
    INTERNATIONAL = "international"


class EmailAction(_ParsableEnum):
    """Lifecycle action of an email interaction."""

    DELIVERED = "delivered"
    OPENED = "opened"
    CLICKED = "clicked"
    REPLIED = "replied"
    BOUNCED = "bounced"


class Classification(str, Enum):
    """Follow-up priority tier."""

    HOT = "hot"
    WARM = "warm"
    COLD = "cold"
    NURTURE = "nurture"

    @property
    def rank(self) -> int:
        """Ordering of tiers: nurture < cold < warm < hot."""
        return _CLASSIFICATION_RANK[self]


_CLASSIFICATION_RANK = {
    Classification.NURTURE: 0,
    Classification.COLD: 1,
    Classification.WARM: 2,
    Classification.HOT: 3,
}


def _pick(data: Mapping[str, Any], snake: str, camel: Optional[str] = None, default: Any = None) -> Any:
    """Read a key from a raw payload in either snake_case or camelCase."""
    if snake in data and data[snake] is not None:
        return data[snake]
    if camel and camel in data and data[camel] is not None:
        return data[camel]
    return default


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_text_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.now()


@dataclass(frozen=True)
class IntakeRecord:
    """A lead's self-reported intake form submission."""

    # Basic information
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    position: str = ""

    # Division and service selection
    division: Union[Division, str, None] = None
    services: List[str] = field(default_factory=list)

    # Qualification data
    company_size: Union[CompanySize, str, None] = None
    industry: str = ""
    budget: Union[BudgetRange, str, None] = None
    timeline: Union[Timeline, str, None] = None
    urgency: int = 3

    # Technology assessment
    current_tech: List[str] = field(default_factory=list)
    pain_points: List[str] = field(default_factory=list)
    pain_point_severity: Optional[Dict[str, float]] = None

    # Project details
    project_description: str = ""
    expected_outcomes: List[str] = field(default_factory=list)
    previous_experience: Union[PreviousExperience, str, None] = None

    # Geographic and market
    location: str = ""
    timezone: str = ""
    market_type: Union[MarketType, str, None] = None

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IntakeRecord":
        """Build a record from a raw form payload.

        Unknown categorical values are kept as raw strings so the scorer can
        route them through its fallback branches.
        """
        severity = _pick(data, "pain_point_severity", "painPointSeverity")
        if not isinstance(severity, Mapping):
            severity = None

        def categorical(enum_cls, snake, camel=None):
            raw = _pick(data, snake, camel)
            return enum_cls.parse(raw) or (raw if isinstance(raw, str) and raw.strip() else None)

        return cls(
            first_name=_as_text(_pick(data, "first_name", "firstName")),
            last_name=_as_text(_pick(data, "last_name", "lastName")),
            email=_as_text(_pick(data, "email")),
            phone=_as_text(_pick(data, "phone")),
            company=_as_text(_pick(data, "company")),
            position=_as_text(_pick(data, "position")),
            division=categorical(Division, "division"),
            services=_as_text_list(_pick(data, "services")),
            company_size=categorical(CompanySize, "company_size", "companySize"),
            industry=_as_text(_pick(data, "industry")),
            budget=categorical(BudgetRange, "budget"),
            timeline=categorical(Timeline, "timeline"),
            urgency=_as_int(_pick(data, "urgency"), 3),
            current_tech=_as_text_list(_pick(data, "current_tech", "currentTech")),
            pain_points=_as_text_list(_pick(data, "pain_points", "painPoints")),
            pain_point_severity=dict(severity) if severity is not None else None,
            project_description=_as_text(_pick(data, "project_description", "projectDescription")),
            expected_outcomes=_as_text_list(_pick(data, "expected_outcomes", "expectedOutcomes")),
            previous_experience=categorical(PreviousExperience, "previous_experience", "previousExperience"),
            location=_as_text(_pick(data, "location")),
            timezone=_as_text(_pick(data, "timezone")),
            market_type=categorical(MarketType, "market_type", "marketType"),
        )


@dataclass(frozen=True)
class PageView:
    """A single tracked page view."""

    url: str
    timestamp: datetime = field(default_factory=datetime.now)
    time_on_page: float = 0  # seconds
    referrer: str = ""
    source: str = ""
    campaign: str = ""


@dataclass(frozen=True)
class EmailInteraction:
    """A single email lifecycle event."""

    action: EmailAction
    campaign_id: str = ""
    step_id: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class EngagementHistory:
    """A lead's engagement with marketing content prior to scoring."""

    page_views: List[PageView] = field(default_factory=list)
    email_interactions: List[EmailInteraction] = field(default_factory=list)

    @property
    def total_time_on_site(self) -> float:
        """Total seconds across all page views."""
        return sum(pv.time_on_page for pv in self.page_views)

    @property
    def last_activity(self) -> Optional[datetime]:
        timestamps = [pv.timestamp for pv in self.page_views]
        timestamps.extend(ei.timestamp for ei in self.email_interactions)
        return max(timestamps) if timestamps else None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EngagementHistory":
        """Build a history from a raw tracker payload, skipping bad entries."""
        page_views = []
        for raw in _pick(data, "page_views", "pageViews", []) or []:
            if not isinstance(raw, Mapping) or not raw.get("url"):
                continue
            time_on_page = _pick(raw, "time_on_page", "timeOnPage", 0)
            try:
                time_on_page = max(0.0, float(time_on_page))
            except (TypeError, ValueError):
                time_on_page = 0.0
            page_views.append(PageView(
                url=str(raw["url"]),
                timestamp=_as_datetime(raw.get("timestamp")),
                time_on_page=time_on_page,
                referrer=_as_text(raw.get("referrer")),
                source=_as_text(raw.get("source")),
                campaign=_as_text(raw.get("campaign")),
            ))

        email_interactions = []
        for raw in _pick(data, "email_interactions", "emailInteractions", []) or []:
            if not isinstance(raw, Mapping):
                continue
            action = EmailAction.parse(raw.get("action"))
            if action is None:
                continue
            email_interactions.append(EmailInteraction(
                action=action,
                campaign_id=_as_text(_pick(raw, "campaign_id", "campaignId")),
                step_id=_as_text(_pick(raw, "step_id", "stepId")),
                timestamp=_as_datetime(raw.get("timestamp")),
            ))

        return cls(page_views=page_views, email_interactions=email_interactions)
