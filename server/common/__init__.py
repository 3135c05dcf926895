"""Project-wide helpers that do not belong to a single app."""
