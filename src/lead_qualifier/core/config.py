"""Configurable scoring weights, thresholds and their persistence."""

import json
import logging
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

logger = logging.getLogger(__name__)

# camelCase names used by form/dashboard clients
_CAMEL_KEYS = {
    "companySize": "company_size",
    "painPoints": "pain_points",
    "techCompatibility": "tech_compatibility",
}


@dataclass(frozen=True)
class ScoringWeights:
    """Weight applied to each sub-score. Intended, not required, to sum to 1.0."""

    company_size: float = 0.20
    budget: float = 0.25
    timeline: float = 0.15
    pain_points: float = 0.20
    tech_compatibility: float = 0.10
    engagement: float = 0.10

    @property
    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True)
class ScoringThresholds:
    """Minimum composite score for each classification tier."""

    hot: float = 80
    warm: float = 60
    cold: float = 40


@dataclass(frozen=True)
class ScoringConfig:
    """Complete scoring configuration; replaced, never mutated."""

    weights: ScoringWeights = field(default_factory=ScoringWeights)
    thresholds: ScoringThresholds = field(default_factory=ScoringThresholds)
    version: str = "1.0"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weights": asdict(self.weights),
            "thresholds": asdict(self.thresholds),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoringConfig":
        return merge_config(cls(), data)


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {_CAMEL_KEYS.get(key, key): value for key, value in data.items()}


def _merge_section(current, update):
    """Merge a weights/thresholds update over the current section value."""
    if update is None:
        return current
    if isinstance(update, type(current)):
        return update
    if not isinstance(update, Mapping):
        raise TypeError(f"Expected mapping for {type(current).__name__}, got {type(update).__name__}")

    known = {f.name for f in fields(current)}
    changes = {}
    for key, value in _normalize_keys(update).items():
        if key not in known:
            logger.warning(f"Ignoring unknown {type(current).__name__} key: {key}")
            continue
        changes[key] = float(value)
    return replace(current, **changes)


def merge_config(
    current: ScoringConfig,
    partial: Union[ScoringConfig, Mapping[str, Any], None],
) -> ScoringConfig:
    """Merge a partial configuration into ``current``.

    ``version`` and section instances replace the current value, while a
    mapping given for ``weights`` or ``thresholds`` is merged key by key over
    the current section, so ``{"thresholds": {"warm": 55}}`` keeps hot and cold.
    """
    if partial is None:
        return current
    if isinstance(partial, ScoringConfig):
        return partial

    return ScoringConfig(
        weights=_merge_section(current.weights, partial.get("weights")),
        thresholds=_merge_section(current.thresholds, partial.get("thresholds")),
        version=str(partial.get("version", current.version)),
    )


class ScoringConfigManager:
    """Manage and persist scoring configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager."""
        self.config_path = Path(config_path) if config_path else (
            Path.home() / ".lead-qualifier" / "scoring_config.json"
        )
        self.updated_at: Optional[datetime] = None
        self.config = self._load_config()

    def _load_config(self) -> ScoringConfig:
        """Load configuration from file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = ScoringConfig.from_dict(data)
                if data.get("updated_at"):
                    self.updated_at = datetime.fromisoformat(data["updated_at"])
                return config
            except (OSError, ValueError, TypeError) as e:
                logger.error(f"Error loading scoring config: {e}")

        return ScoringConfig()

    def save_config(self):
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.updated_at = datetime.now()
        data = self.config.to_dict()
        data["updated_at"] = self.updated_at.isoformat()
        with open(self.config_path, 'w') as f:
            json.dump(data, f, indent=2)

    def update(self, partial: Mapping[str, Any]) -> ScoringConfig:
        """Merge a partial configuration and persist it."""
        self.config = merge_config(self.config, partial)
        self.save_config()
        return self.config

    def update_weights(self, **weights: float) -> ScoringConfig:
        """Update one or more factor weights."""
        return self.update({"weights": weights})

    def update_thresholds(self, hot: float, warm: float, cold: float) -> ScoringConfig:
        """Update tier thresholds."""
        return self.update({"thresholds": {"hot": hot, "warm": warm, "cold": cold}})

    def set_version(self, version: str) -> ScoringConfig:
        return self.update({"version": version})

    def reset(self) -> ScoringConfig:
        """Restore the default configuration."""
        self.config = ScoringConfig()
        self.save_config()
        return self.config

    def build_engine(self):
        """Create a scoring engine using the managed configuration."""
        from .scorer import LeadScoringEngine

        return LeadScoringEngine(self.config)
