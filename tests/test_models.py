"""Tests for intake and engagement models."""

from datetime import datetime

from lead_qualifier.core.models import (
    BudgetRange,
    Classification,
    CompanySize,
    Division,
    EmailAction,
    EngagementHistory,
    IntakeRecord,
    PageView,
    Timeline,
)


class TestEnumParsing:

    def test_parse_known_values(self):
        assert CompanySize.parse("enterprise") == CompanySize.ENTERPRISE
        assert CompanySize.parse(" Startup ") == CompanySize.STARTUP
        assert Timeline.parse("within-month") == Timeline.WITHIN_MONTH
        assert BudgetRange.parse(BudgetRange.UNDER_10K) == BudgetRange.UNDER_10K

    def test_budget_alias(self):
        assert BudgetRange.parse("500k+") == BudgetRange.OVER_500K

    def test_parse_unknown_values(self):
        assert CompanySize.parse("huge") is None
        assert Timeline.parse(None) is None
        assert BudgetRange.parse(42) is None

    def test_classification_rank(self):
        ordered = [Classification.NURTURE, Classification.COLD, Classification.WARM, Classification.HOT]
        assert [c.rank for c in ordered] == [0, 1, 2, 3]


class TestIntakeRecord:

    def test_from_camel_case_payload(self):
        record = IntakeRecord.from_dict({
            "firstName": "Grace",
            "lastName": "Hopper",
            "email": "grace@example.com",
            "division": "labs",
            "companySize": "medium",
            "budget": "500k+",
            "timeline": "within-quarter",
            "urgency": "4",
            "currentTech": ["Python"],
            "painPoints": ["scalability"],
            "painPointSeverity": {"scalability": 4},
            "projectDescription": "Scale the platform",
        })
        assert record.full_name == "Grace Hopper"
        assert record.division == Division.LABS
        assert record.company_size == CompanySize.MEDIUM
        assert record.budget == BudgetRange.OVER_500K
        assert record.timeline == Timeline.WITHIN_QUARTER
        assert record.urgency == 4
        assert record.current_tech == ["Python"]
        assert record.pain_point_severity == {"scalability": 4}

    def test_unknown_categorical_kept_raw(self):
        record = IntakeRecord.from_dict({"company_size": "conglomerate"})
        assert record.company_size == "conglomerate"

    def test_malformed_values_degrade(self):
        record = IntakeRecord.from_dict({
            "urgency": "very",
            "services": "consulting",
            "pain_points": [None, "", "security"],
            "pain_point_severity": ["not", "a", "map"],
            "email": 123,
        })
        assert record.urgency == 3
        assert record.services == ["consulting"]
        assert record.pain_points == ["security"]
        assert record.pain_point_severity is None
        assert record.email == ""

    def test_empty_payload(self):
        record = IntakeRecord.from_dict({})
        assert record == IntakeRecord()


class TestEngagementHistory:

    def test_from_dict(self):
        history = EngagementHistory.from_dict({
            "pageViews": [
                {"url": "/pricing", "timestamp": "2024-05-01T10:00:00Z", "timeOnPage": 120},
                {"url": "/about", "time_on_page": "bad"},
                {"timeOnPage": 30},
            ],
            "emailInteractions": [
                {"action": "opened", "campaignId": "welcome"},
                {"action": "forwarded"},
            ],
        })
        assert [pv.url for pv in history.page_views] == ["/pricing", "/about"]
        assert history.page_views[0].time_on_page == 120
        assert history.page_views[1].time_on_page == 0
        assert len(history.email_interactions) == 1
        assert history.email_interactions[0].action == EmailAction.OPENED
        assert history.email_interactions[0].campaign_id == "welcome"
        assert history.total_time_on_site == 120

    def test_last_activity(self):
        early = datetime(2024, 1, 1)
        late = datetime(2024, 2, 1)
        history = EngagementHistory(page_views=[PageView(url="/", timestamp=early), PageView(url="/x", timestamp=late)])
        assert history.last_activity == late
        assert EngagementHistory().last_activity is None
