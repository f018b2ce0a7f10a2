"""Sample component package used by discovery and CLI tests."""
