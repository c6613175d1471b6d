"""REST API for diagnostic test records."""
