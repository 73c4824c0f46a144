"""Service layer between routes and the scoring engine."""
