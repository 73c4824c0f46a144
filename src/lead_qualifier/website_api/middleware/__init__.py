"""Request middleware for the scoring API."""
