"""
Trend Relevance Engine.

Scores trend signals against organizations, grades them for action
readiness and selects a diversified set for each organization.
"""

__version__ = "1.0.0"
