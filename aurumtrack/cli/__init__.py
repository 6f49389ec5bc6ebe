"""Command line interface entry points for AurumTrack."""

from .main import app, create_app

__all__ = ["app", "create_app"]
