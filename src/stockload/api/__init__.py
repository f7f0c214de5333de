"""HTTP upload API."""

from stockload.api.app import create_app, get_db

__all__ = ["create_app", "get_db"]
