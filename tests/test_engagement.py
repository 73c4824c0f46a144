"""Tests for engagement tracking."""

import json
import tempfile
from datetime import datetime
from pathlib import Path

import pytest
from lead_qualifier.core.models import EmailAction, IntakeRecord
from lead_qualifier.core.scorer import LeadScoringEngine
from lead_qualifier.tracking import EngagementTracker


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestEngagementTracker:

    def setup_method(self):
        self.tracker = EngagementTracker()

    def test_unknown_lead_has_no_history(self):
        assert self.tracker.get_history("nobody") is None

    def test_record_and_build_history(self):
        self.tracker.record_page_view("lead-1", "/pricing", time_on_page=120)
        self.tracker.record_page_view("lead-1", "/case-studies", time_on_page=60)
        self.tracker.record_email_interaction("lead-1", "opened", campaign_id="welcome")

        history = self.tracker.get_history("lead-1")
        assert [pv.url for pv in history.page_views] == ["/pricing", "/case-studies"]
        assert history.email_interactions[0].action == EmailAction.OPENED
        assert history.total_time_on_site == 180
        assert self.tracker.lead_ids() == ["lead-1"]

    def test_history_feeds_scoring(self):
        for i in range(5):
            self.tracker.record_page_view("lead-2", f"/page/{i}", time_on_page=120)
        self.tracker.record_email_interaction("lead-2", EmailAction.CLICKED)

        result = LeadScoringEngine().compute(IntakeRecord(), self.tracker.get_history("lead-2"))
        # 5 views * 3 + 1 email * 8 + 600s / 60
        assert result.engagement_score == 33

    def test_negative_time_clamped(self):
        page_view = self.tracker.record_page_view("lead-3", "/", time_on_page=-30)
        assert page_view.time_on_page == 0

    def test_unknown_email_action(self):
        with pytest.raises(ValueError):
            self.tracker.record_email_interaction("lead-1", "forwarded")

    def test_clear(self):
        self.tracker.record_page_view("lead-1", "/")
        self.tracker.clear("lead-1")
        assert self.tracker.get_history("lead-1") is None

    def test_handlers(self):
        seen = []
        self.tracker.on_event(lambda lead_id, event: seen.append((lead_id, event.url)))
        self.tracker.record_page_view("lead-1", "/contact")
        assert seen == [("lead-1", "/contact")]

    def test_failing_handler_does_not_block_tracking(self):
        def broken(lead_id, event):
            raise RuntimeError("boom")

        self.tracker.on_event(broken)
        self.tracker.record_page_view("lead-1", "/contact")
        assert len(self.tracker.get_history("lead-1").page_views) == 1


class TestEngagementPersistence:

    def test_round_trip(self, temp_data_dir):
        path = temp_data_dir / "engagement.jsonl"
        tracker = EngagementTracker(path)
        tracker.record_page_view("lead-1", "/pricing", time_on_page=45, timestamp=datetime(2024, 3, 1, 9, 30))
        tracker.record_email_interaction("lead-1", "replied", step_id="s2")

        reloaded = EngagementTracker(path)
        history = reloaded.get_history("lead-1")
        assert history.page_views[0].url == "/pricing"
        assert history.page_views[0].time_on_page == 45
        assert history.page_views[0].timestamp == datetime(2024, 3, 1, 9, 30)
        assert history.email_interactions[0].action == EmailAction.REPLIED
        assert history.email_interactions[0].step_id == "s2"

    def test_events_appended_not_rewritten(self, temp_data_dir):
        """Recording for one lead leaves the lines already written untouched."""
        path = temp_data_dir / "engagement.jsonl"
        tracker = EngagementTracker(path)
        tracker.record_page_view("lead-1", "/pricing")
        first_line = path.read_text().splitlines()[0]

        tracker.record_page_view("lead-2", "/about")
        tracker.record_email_interaction("lead-2", "opened")

        lines = path.read_text().splitlines()
        assert len(lines) == 3
        assert lines[0] == first_line
        assert [json.loads(line)["lead_id"] for line in lines] == ["lead-1", "lead-2", "lead-2"]

    def test_clear_persists_and_log_compacts(self, temp_data_dir):
        path = temp_data_dir / "engagement.jsonl"
        tracker = EngagementTracker(path)
        tracker.record_page_view("lead-1", "/a")
        tracker.record_page_view("lead-1", "/b")
        tracker.clear("lead-1")
        tracker.record_page_view("lead-2", "/c")
        assert len(path.read_text().splitlines()) == 4

        reloaded = EngagementTracker(path)
        assert reloaded.lead_ids() == ["lead-2"]
        assert reloaded.get_history("lead-1") is None
        assert [json.loads(line)["url"] for line in path.read_text().splitlines()] == ["/c"]

    def test_malformed_lines_skipped(self, temp_data_dir):
        path = temp_data_dir / "engagement.jsonl"
        tracker = EngagementTracker(path)
        tracker.record_page_view("lead-1", "/pricing")
        with open(path, 'a') as f:
            f.write("not json\n")
            f.write(json.dumps({"kind": "email", "lead_id": "lead-1", "action": "forwarded"}) + "\n")
        tracker.record_email_interaction("lead-1", "clicked")

        history = EngagementTracker(path).get_history("lead-1")
        assert [pv.url for pv in history.page_views] == ["/pricing"]
        assert [ei.action for ei in history.email_interactions] == [EmailAction.CLICKED]

    def test_corrupt_file_ignored(self, temp_data_dir):
        path = temp_data_dir / "engagement.jsonl"
        path.write_text("not json")
        assert EngagementTracker(path).lead_ids() == []
