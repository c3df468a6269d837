"""Shared utilities (archive unpacking, input validation)."""
