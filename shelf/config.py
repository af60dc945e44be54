# shelf/config.py
import os
from dataclasses import dataclass, field


def _env(*names: str, default: str) -> str:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


@dataclass
class Settings:
    # Storage
    database_url: str = field(
        default_factory=lambda: _env("SHELF_DATABASE_URL", "DATABASE_URL", default="sqlite:///shelf.db")
    )

    # Identity of the caller; every record is scoped to it
    owner: str = field(default_factory=lambda: _env("SHELF_OWNER", default="default"))

    # Lifetime of a notification, and therefore of the memo undo window
    notification_ttl: float = field(
        default_factory=lambda: float(_env("SHELF_NOTIFICATION_TTL", default="4"))
    )

    log_level: str = field(default_factory=lambda: _env("SHELF_LOG_LEVEL", default="INFO").upper())


settings = Settings()
