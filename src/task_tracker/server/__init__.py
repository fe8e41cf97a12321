"""HTTP server for the task tracker."""

from .api import create_app

__all__ = ["create_app"]
