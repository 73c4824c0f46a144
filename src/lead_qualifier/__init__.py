"""Lead Qualifier - weighted intake scoring for sales lead prioritization."""

__version__ = "1.0.0"
