"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from orderboard.models import order as _order  # noqa: E402,F401
from orderboard.models import site as _site  # noqa: E402,F401
