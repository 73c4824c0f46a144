"""Fixed lookup tables and keyword lists for lead qualification scoring.

These encode business rules; the lists are matched as case-insensitive
substrings and must be kept verbatim.
"""

from typing import Dict, List, Tuple

from .models import BudgetRange, CompanySize, Timeline

# === COMPANY ===

COMPANY_BASE_SCORE = 50

COMPANY_SIZE_SCORES: Dict[CompanySize, int] = {
    CompanySize.STARTUP: 60,
    CompanySize.SMALL: 70,
    CompanySize.MEDIUM: 85,
    CompanySize.ENTERPRISE: 95,
}

HIGH_VALUE_INDUSTRIES: List[str] = [
    "technology", "fintech", "healthcare", "saas", "ecommerce",
    "finance", "consulting", "manufacturing",
]

INDUSTRY_BONUS = 10
INDUSTRY_FACTOR_WEIGHT = 0.05

# === BUDGET ===

BUDGET_FALLBACK_SCORE = 30

BUDGET_SCORES: Dict[BudgetRange, int] = {
    BudgetRange.UNDER_10K: 30,
    BudgetRange.FROM_10K_TO_50K: 60,
    BudgetRange.FROM_50K_TO_100K: 80,
    BudgetRange.FROM_100K_TO_500K: 95,
    BudgetRange.OVER_500K: 100,
}

# === TIMELINE ===

TIMELINE_FALLBACK_SCORE = 30

TIMELINE_SCORES: Dict[Timeline, int] = {
    Timeline.IMMEDIATE: 100,
    Timeline.WITHIN_MONTH: 85,
    Timeline.WITHIN_QUARTER: 70,
    Timeline.WITHIN_YEAR: 45,
}

NEUTRAL_URGENCY = 3
URGENCY_STEP = 0.1
MIN_URGENCY = 1
MAX_URGENCY = 5

# === PAIN POINTS ===

NO_PAIN_POINTS_SCORE = 20
PAIN_POINT_BASE_SCORE = 40
SEVERITY_MULTIPLIER = 10
HIGH_IMPACT_BONUS = 15

HIGH_IMPACT_PAIN_POINTS: List[str] = [
    "revenue growth", "cost reduction", "efficiency", "automation",
    "competitive advantage", "scalability", "security", "compliance",
    "customer experience", "data insights",
]

# === TECHNOLOGY ===

NO_TECH_SCORE = 50
TECH_BASE_SCORE = 30

# (level, per-match bonus, keywords); order is label precedence
TECH_COMPATIBILITY_TIERS: List[Tuple[str, int, List[str]]] = [
    ("high", 20, ["react", "nextjs", "typescript", "nodejs", "python", "supabase", "postgresql"]),
    ("medium", 10, ["javascript", "html", "css", "mysql", "mongodb", "firebase"]),
    ("emerging", 15, ["ai", "machine learning", "automation", "api", "cloud"]),
]

# === ENGAGEMENT ===

NO_ENGAGEMENT_SCORE = 50
PAGE_VIEW_POINTS = 3
PAGE_VIEW_CAP = 30
EMAIL_INTERACTION_POINTS = 8
EMAIL_INTERACTION_CAP = 40
SECONDS_PER_TIME_POINT = 60
TIME_ON_SITE_CAP = 30

# === CONFIDENCE ===

COMPLETENESS_WEIGHT = 0.7
CONSISTENCY_WEIGHT = 0.3
CONFIDENCE_FIELD_COUNT = 12

STARTUP_LARGE_BUDGET_PENALTY = 20
ENTERPRISE_SMALL_BUDGET_PENALTY = 30
TIMELINE_URGENCY_PENALTY = 15

STARTUP_IMPLAUSIBLE_BUDGETS = (BudgetRange.FROM_100K_TO_500K, BudgetRange.OVER_500K)
