"""API package for interview feedback."""

from .main import app, create_app

__all__ = ["app", "create_app"]
