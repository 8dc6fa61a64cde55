"""Declarative base for Cerebro SQLAlchemy models."""

from sqlalchemy.orm import DeclarativeBase


class BaseEntity(DeclarativeBase):
    """Base class for all Cerebro database entities."""
