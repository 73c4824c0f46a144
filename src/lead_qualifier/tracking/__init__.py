"""Engagement tracking for lead scoring."""

from .engagement import EngagementTracker

__all__ = [
    'EngagementTracker',
]
