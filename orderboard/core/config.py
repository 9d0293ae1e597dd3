"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "orderboard API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./orderboard.db")
    report_timezone: str = getenv("REPORT_TIMEZONE", "America/Edmonton")
    max_custom_days: int = int(getenv("MAX_CUSTOM_DAYS", "62"))
    day_lookahead_days: int = int(getenv("DAY_LOOKAHEAD_DAYS", "7"))
    day_lookahead_max_days: int = int(getenv("DAY_LOOKAHEAD_MAX_DAYS", "14"))
    seed_demo_data: bool = getenv("SEED_DEMO_DATA", "1") == "1"


settings: Settings = Settings()
