"""Shared helpers without domain knowledge."""
