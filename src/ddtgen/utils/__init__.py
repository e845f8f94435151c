"""Shared helpers: typed errors, logging and character tables."""
