"""Utility packages for the content graph."""
