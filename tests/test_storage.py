"""Tests for score storage."""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from lead_qualifier.core.models import Classification, IntakeRecord
from lead_qualifier.core.scorer import LeadScoringEngine
from lead_qualifier.storage import ScoreDatabase


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def db(temp_data_dir):
    return ScoreDatabase(temp_data_dir / "scores.db")


@pytest.fixture
def engine():
    return LeadScoringEngine()


def hot_intake() -> IntakeRecord:
    return IntakeRecord(
        company_size="enterprise",
        budget="500k-plus",
        timeline="immediate",
        urgency=5,
        pain_points=["cost reduction", "automation"],
        pain_point_severity={"cost reduction": 5},
        current_tech=["React", "PostgreSQL"],
    )


def scored(engine, intake, lead_id, **overrides):
    result = engine.compute(intake)
    result.lead_id = lead_id
    for key, value in overrides.items():
        setattr(result, key, value)
    return result


class TestScoreDatabase:

    def test_save_and_load(self, db, engine):
        result = scored(engine, hot_intake(), "lead-1")
        db.save_score(result)

        loaded = db.get_latest_score("lead-1")
        assert loaded.id == result.id
        assert loaded.total_score == result.total_score
        assert loaded.classification == Classification.HOT
        assert loaded.component_scores == result.component_scores
        assert [f.to_dict() for f in loaded.factors] == [f.to_dict() for f in result.factors]
        assert loaded.calculated_at == result.calculated_at

    def test_requires_lead_id(self, db, engine):
        with pytest.raises(ValueError):
            db.save_score(engine.compute(IntakeRecord()))

    def test_missing_lead(self, db):
        assert db.get_latest_score("nobody") is None

    def test_history_newest_first(self, db, engine):
        now = datetime.now()
        old = scored(engine, IntakeRecord(), "lead-1", calculated_at=now - timedelta(days=2))
        new = scored(engine, hot_intake(), "lead-1", calculated_at=now)
        db.save_score(old)
        db.save_score(new)

        history = db.get_scores_for_lead("lead-1")
        assert [r.id for r in history] == [new.id, old.id]
        assert db.get_latest_score("lead-1").id == new.id

    def test_list_filters(self, db, engine):
        db.save_score(scored(engine, hot_intake(), "hot-lead"))
        db.save_score(scored(engine, IntakeRecord(), "cold-lead"))

        assert [r.lead_id for r in db.list_scores()] == ["hot-lead", "cold-lead"]
        assert [r.lead_id for r in db.list_scores(Classification.NURTURE)] == ["cold-lead"]
        assert [r.lead_id for r in db.list_scores(min_score=80)] == ["hot-lead"]

    def test_delete(self, db, engine):
        db.save_score(scored(engine, IntakeRecord(), "lead-1"))
        assert db.delete_scores("lead-1") == 1
        assert db.get_latest_score("lead-1") is None

    def test_stats(self, db, engine):
        db.save_score(scored(engine, hot_intake(), "a"))
        db.save_score(scored(engine, IntakeRecord(), "b"))
        db.save_score(scored(engine, IntakeRecord(), "b"))

        stats = db.get_stats()
        assert stats["total_scores"] == 3
        assert stats["leads"] == 2
        assert stats["by_classification"] == {"hot": 1, "nurture": 2}

    def test_empty_stats(self, db):
        stats = db.get_stats()
        assert stats["total_scores"] == 0
        assert stats["average_score"] is None
