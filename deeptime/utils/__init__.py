"""Logging setup and the scene event feed."""
