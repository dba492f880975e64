"""OfficePilot - desired-state Office deployment planner."""

__version__ = "0.1.0"
