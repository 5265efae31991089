"""Gavel API package - FastAPI backend for the auction simulator."""

from gavel.api.main import app, create_app

__all__ = ["app", "create_app"]
