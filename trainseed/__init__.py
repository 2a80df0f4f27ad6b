"""Extract train-name histories from hand-maintained CSV exports and seed them into PostgreSQL."""

__version__ = "0.1.0"
