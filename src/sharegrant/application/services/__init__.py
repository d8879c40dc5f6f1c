"""Permission cascade services."""
