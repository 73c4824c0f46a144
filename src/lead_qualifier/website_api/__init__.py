"""HTTP service for lead scoring."""
