"""Database seeding helpers."""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from orderboard.core.config import settings
from orderboard.models import Order, OrderItem, Site

logger = logging.getLogger(__name__)

DEMO_SITE_SLUG: str = "demo"

DEMO_ORDERS: list[dict] = [
    {"days_ago": 0, "status": "new", "total_cents": 2450, "dropoff_phone": "+15875550101", "items": ["Butter Chicken", "Naan"]},
    {"days_ago": 1, "status": "fulfilled", "total_cents": 1800, "user_email": "sam@example.com", "items": ["Paneer Tikka"]},
    {"days_ago": 1, "status": "Awaiting_Payment", "total_cents": 3200, "user_email": "pending@example.com", "items": ["Thali"]},
    {"days_ago": 3, "status": "accepted", "total_cents": 1275, "dropoff_phone": "+15875550101", "items": ["Naan", "Chai"]},
]


def ensure_seed_data(session: Session) -> bool:
    """Create a demo site with a few orders in development only.

    Returns True when demo data was inserted.
    """
    if settings.app_env != "dev" or not settings.seed_demo_data:
        return False

    existing = session.scalar(select(Site).where(Site.slug == DEMO_SITE_SLUG).limit(1))
    if existing is not None:
        return False

    site = Site(slug=DEMO_SITE_SLUG, name="Demo Kitchen")
    session.add(site)
    session.flush()

    now = datetime.now(timezone.utc)
    for payload in DEMO_ORDERS:
        order = Order(
            site_id=site.id,
            created_at=now - timedelta(days=payload["days_ago"]),
            status=payload["status"],
            total_cents=payload["total_cents"],
            user_email=payload.get("user_email"),
            dropoff_phone=payload.get("dropoff_phone"),
            fulfillment_type="delivery" if payload.get("dropoff_phone") else "pickup",
        )
        order.items = [OrderItem(name=name, quantity=1) for name in payload["items"]]
        session.add(order)

    session.commit()
    logger.info("[BOOTSTRAP] Seeded demo site '%s' with %s orders", DEMO_SITE_SLUG, len(DEMO_ORDERS))
    return True
