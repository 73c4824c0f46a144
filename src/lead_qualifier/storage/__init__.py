"""Storage layer for computed lead scores."""

from .database import ScoreDatabase

__all__ = ["ScoreDatabase"]
