"""stockload — CSV product upload into a relational table."""

from stockload.database import DatabaseService, create_service

__version__ = "0.1.0"

__all__ = ["DatabaseService", "create_service"]
