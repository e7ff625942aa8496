"""Core search logic — filtering, ranking, and request coordination."""
