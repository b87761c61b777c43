"""Persistence layer (SQLAlchemy async)."""

from keyhold.infrastructure.persistence.base import BaseModel, BaseMutableModel
from keyhold.infrastructure.persistence.database import Database

__all__ = ["BaseModel", "BaseMutableModel", "Database"]
