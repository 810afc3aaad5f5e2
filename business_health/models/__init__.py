"""Data models for business health scoring."""
