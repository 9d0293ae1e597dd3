"""Shared DB helpers for the Streamlit dashboard."""

from datetime import datetime

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from orderboard.core.config import settings
from orderboard.db.base import Base
from orderboard.models import Site

engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if settings.database_url.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base.metadata.create_all(bind=engine)


def get_session() -> Session:
    return SessionLocal()


def list_sites(db: Session) -> list[Site]:
    return list(db.scalars(select(Site).order_by(Site.slug)).all())


def now_string() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M")
