"""Customer identity shared by every report and listing."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from orderboard.models.order import Order

# Highest priority first: the delivery contact phone, then the account email.
CUSTOMER_IDENTITY_FIELDS: tuple[str, ...] = ("dropoff_phone", "user_email")


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text_value = str(value).strip()
    return text_value or None


def customer_identity(order: Any) -> str | None:
    """Return the first non-blank identity field of ``order``, or None."""
    for field_name in CUSTOMER_IDENTITY_FIELDS:
        if isinstance(order, dict):
            value = order.get(field_name)
        else:
            value = getattr(order, field_name, None)
        cleaned = _clean(value)
        if cleaned is not None:
            return cleaned
    return None


def customer_identity_expr() -> ColumnElement[str]:
    """SQL form of :func:`customer_identity` for in-database grouping."""
    return func.coalesce(
        *(func.nullif(func.trim(getattr(Order, field_name)), "") for field_name in CUSTOMER_IDENTITY_FIELDS)
    )
