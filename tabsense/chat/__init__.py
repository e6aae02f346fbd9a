"""Chat command parsing and intent routing."""
