"""FastAPI application exposing the narrative engine."""

from .app import create_app

__all__ = ["create_app"]
