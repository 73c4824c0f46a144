"""Per-lead engagement tracking for page views and email interactions.

When a storage path is given, events are appended to a JSON-lines log (one
record per line) so recording an event never rewrites other leads' data.
The log is replayed on startup and compacted when it holds dropped records.
"""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..core.models import EmailAction, EmailInteraction, EngagementHistory, PageView

logger = logging.getLogger(__name__)

# Keep the most recent N events per lead
MAX_EVENTS_PER_LEAD = 1000

PAGE_VIEW = "page_view"
EMAIL = "email"
CLEAR = "clear"

EngagementHandler = Callable[[str, Union[PageView, EmailInteraction]], None]


def _page_view_record(lead_id: str, page_view: PageView) -> Dict[str, Any]:
    return {
        "kind": PAGE_VIEW,
        "lead_id": lead_id,
        "url": page_view.url,
        "timestamp": page_view.timestamp.isoformat(),
        "time_on_page": page_view.time_on_page,
        "referrer": page_view.referrer,
        "source": page_view.source,
        "campaign": page_view.campaign,
    }


def _email_record(lead_id: str, interaction: EmailInteraction) -> Dict[str, Any]:
    return {
        "kind": EMAIL,
        "lead_id": lead_id,
        "action": interaction.action.value,
        "campaign_id": interaction.campaign_id,
        "step_id": interaction.step_id,
        "timestamp": interaction.timestamp.isoformat(),
    }


class EngagementTracker:
    """Collect engagement events and build histories for scoring."""

    def __init__(self, storage_path: Optional[Path] = None):
        """Initialize tracker, optionally persisting to a JSON-lines log."""
        self.storage_path = Path(storage_path) if storage_path else None
        self._page_views: Dict[str, List[PageView]] = {}
        self._email_interactions: Dict[str, List[EmailInteraction]] = {}
        self._handlers: List[EngagementHandler] = []
        self._lock = threading.Lock()

        self._load_events()

    def _load_events(self):
        """Replay the event log from disk."""
        if not self.storage_path or not self.storage_path.exists():
            return

        replayed = 0
        try:
            with open(self.storage_path, 'r') as f:
                for line_number, line in enumerate(f, 1):
                    if not line.strip():
                        continue
                    try:
                        record = json.loads(line)
                    except ValueError:
                        logger.error(f"Skipping malformed engagement record at line {line_number}")
                        continue
                    if isinstance(record, dict) and self._apply_record(record):
                        replayed += 1
        except OSError as e:
            logger.error(f"Error loading engagement data: {e}")
            return

        if replayed > self._event_count():
            self.compact()

    def _apply_record(self, record: Dict[str, Any]) -> bool:
        """Apply one log record to the in-memory store."""
        lead_id = record.get("lead_id")
        if not isinstance(lead_id, str) or not lead_id:
            return False

        kind = record.get("kind")
        if kind == CLEAR:
            self._page_views.pop(lead_id, None)
            self._email_interactions.pop(lead_id, None)
            return True

        if kind == PAGE_VIEW:
            parsed = EngagementHistory.from_dict({"page_views": [record]}).page_views
            store = self._page_views
        elif kind == EMAIL:
            parsed = EngagementHistory.from_dict({"email_interactions": [record]}).email_interactions
            store = self._email_interactions
        else:
            return False

        if not parsed:
            return False

        events = store.setdefault(lead_id, [])
        events.extend(parsed)
        del events[:-MAX_EVENTS_PER_LEAD]
        return True

    def _event_count(self) -> int:
        return (
            sum(len(events) for events in self._page_views.values())
            + sum(len(events) for events in self._email_interactions.values())
        )

    def _append(self, record: Dict[str, Any]):
        """Append a single record to the log. Caller holds the lock."""
        if not self.storage_path:
            return

        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.storage_path, 'a') as f:
            f.write(json.dumps(record) + "\n")

    def compact(self):
        """Rewrite the log with only the events currently held."""
        if not self.storage_path:
            return

        with self._lock:
            records = []
            for lead_id in sorted(set(self._page_views) | set(self._email_interactions)):
                records.extend(_page_view_record(lead_id, pv) for pv in self._page_views.get(lead_id, []))
                records.extend(_email_record(lead_id, ei) for ei in self._email_interactions.get(lead_id, []))

            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.storage_path, 'w') as f:
                for record in records:
                    f.write(json.dumps(record) + "\n")

        logger.info(f"Compacted engagement log to {len(records)} events")

    def on_event(self, handler: EngagementHandler):
        """Register a handler called with (lead_id, event) for every event."""
        self._handlers.append(handler)

    def _trigger_handlers(self, lead_id: str, event: Union[PageView, EmailInteraction]):
        for handler in self._handlers:
            try:
                handler(lead_id, event)
            except Exception:
                logger.exception(f"Engagement handler failed for lead {lead_id}")

    def record_page_view(
        self,
        lead_id: str,
        url: str,
        time_on_page: float = 0,
        timestamp: Optional[datetime] = None,
        referrer: str = "",
        source: str = "",
        campaign: str = "",
    ) -> PageView:
        """Record a page view for a lead."""
        page_view = PageView(
            url=url,
            timestamp=timestamp or datetime.now(),
            time_on_page=max(0, time_on_page),
            referrer=referrer,
            source=source,
            campaign=campaign,
        )

        with self._lock:
            events = self._page_views.setdefault(lead_id, [])
            events.append(page_view)
            del events[:-MAX_EVENTS_PER_LEAD]
            self._append(_page_view_record(lead_id, page_view))

        self._trigger_handlers(lead_id, page_view)
        return page_view

    def record_email_interaction(
        self,
        lead_id: str,
        action: Union[EmailAction, str],
        campaign_id: str = "",
        step_id: str = "",
        timestamp: Optional[datetime] = None,
    ) -> EmailInteraction:
        """Record an email lifecycle event for a lead."""
        parsed = EmailAction.parse(action)
        if parsed is None:
            raise ValueError(f"Unknown email action: {action}")

        interaction = EmailInteraction(
            action=parsed,
            campaign_id=campaign_id,
            step_id=step_id,
            timestamp=timestamp or datetime.now(),
        )

        with self._lock:
            events = self._email_interactions.setdefault(lead_id, [])
            events.append(interaction)
            del events[:-MAX_EVENTS_PER_LEAD]
            self._append(_email_record(lead_id, interaction))

        self._trigger_handlers(lead_id, interaction)
        return interaction

    def get_history(self, lead_id: str) -> Optional[EngagementHistory]:
        """Return the lead's history, or None if nothing was tracked."""
        with self._lock:
            page_views = list(self._page_views.get(lead_id, []))
            email_interactions = list(self._email_interactions.get(lead_id, []))

        if not page_views and not email_interactions:
            return None

        return EngagementHistory(
            page_views=page_views,
            email_interactions=email_interactions,
        )

    def lead_ids(self) -> List[str]:
        with self._lock:
            return sorted(set(self._page_views) | set(self._email_interactions))

    def clear(self, lead_id: str):
        """Forget all events for a lead."""
        with self._lock:
            self._page_views.pop(lead_id, None)
            self._email_interactions.pop(lead_id, None)
            self._append({"kind": CLEAR, "lead_id": lead_id})
