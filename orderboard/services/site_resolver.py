"""Site lookup by slug or canonical id."""

import re

from sqlalchemy import select
from sqlalchemy.orm import Session

from orderboard.core.errors import NotFoundError, ValidationError
from orderboard.models.site import SITE_ID_LENGTH, Site

SITE_ID_PATTERN = re.compile(rf"^[0-9a-fA-F]{{{SITE_ID_LENGTH}}}$")


def is_site_id(identifier: str) -> bool:
    """Return True when ``identifier`` has the shape of a canonical site id."""
    return bool(SITE_ID_PATTERN.match(identifier))


def get_site_by_id(db: Session, site_id: str) -> Site | None:
    return db.scalar(select(Site).where(Site.id == site_id.lower()).limit(1))


def get_site_by_slug(db: Session, slug: str) -> Site | None:
    return db.scalar(select(Site).where(Site.slug == slug).limit(1))


def resolve_site(db: Session, identifier: str | None) -> Site:
    """Resolve a slug or id-shaped identifier to its site.

    Id lookup is attempted first only for id-shaped strings; a slug that
    happens to look like an id still resolves through the slug lookup.
    """
    if not identifier or not isinstance(identifier, str) or not identifier.strip():
        raise ValidationError("`site` is required (slug or id)")
    identifier = identifier.strip()

    site: Site | None = None
    if is_site_id(identifier):
        site = get_site_by_id(db, identifier)
    if site is None:
        site = get_site_by_slug(db, identifier)
    if site is None:
        raise NotFoundError("Site not found")
    return site
