from datetime import datetime

from app.config import Settings, settings


def get_settings() -> Settings:
    return settings


def get_now() -> datetime:
    """Evaluation clock for requests that do not pin `as_of`; tests override it."""
    return datetime.now()
