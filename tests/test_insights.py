"""Tests for score insights."""

from lead_qualifier.core.insights import InsightType, generate_insights
from lead_qualifier.core.models import IntakeRecord
from lead_qualifier.core.scorer import LeadScoringEngine


class TestGenerateInsights:

    def setup_method(self):
        self.engine = LeadScoringEngine()

    def test_hot_lead(self):
        result = self.engine.compute(IntakeRecord(
            company_size="enterprise",
            budget="500k-plus",
            timeline="immediate",
            urgency=5,
            pain_points=["cost reduction", "automation"],
            pain_point_severity={"cost reduction": 5, "automation": 5},
            current_tech=["React", "Python"],
        ))
        titles = [i.title for i in generate_insights(result)]
        assert titles == [
            "Strong Budget Alignment",
            "Urgent Timeline",
            "Clear Pain Points",
            "Priority Consultation",
        ]

    def test_blank_lead(self):
        """Blank intake: weak tech stack, no tier recommendation."""
        insights = generate_insights(self.engine.compute(IntakeRecord()))
        assert len(insights) == 1
        assert insights[0].type == InsightType.OPPORTUNITY
        assert insights[0].title == "Technology Modernization"

    def test_warm_lead(self):
        result = self.engine.compute(IntakeRecord(
            company_size="medium",
            budget="50k-100k",
            timeline="within-month",
            pain_points=["efficiency"],
            current_tech=["React"],
        ))
        insights = generate_insights(result)
        assert insights[-1].title == "Detailed Proposal"
        assert insights[-1].to_dict()["type"] == "recommendation"
