"""Job eligibility and match scoring engine for campus placements."""

__version__ = "0.1.0"
