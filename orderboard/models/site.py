"""Site (tenant) ORM model."""

import secrets
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderboard.db.base import Base

SITE_ID_LENGTH: int = 24


def new_site_id() -> str:
    """Return a fresh 24-character lowercase hexadecimal site id."""
    return secrets.token_hex(SITE_ID_LENGTH // 2)


class Site(Base):
    """A restaurant or store whose orders are reported on."""

    __tablename__ = "sites"

    id: Mapped[str] = mapped_column(String(SITE_ID_LENGTH), primary_key=True, default=new_site_id)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    orders: Mapped[list["Order"]] = relationship(back_populates="site")

    @property
    def display_name(self) -> str:
        return self.name or self.slug
