"""Services for OfficePilot."""
