"""HTTP interface for the scanner dashboard."""

from .app import create_app

__all__ = ["create_app"]
