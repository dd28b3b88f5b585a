"""Settings for the rollup engine.

Values come from environment variables (a ``.env`` file is honoured when
present). The sales tax rate is a fixed constant in ``pricing`` and is not
read from here.
"""
import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration."""

    database_url: str | None = None
    db_path: Path = Path(__file__).resolve().parent / "rollup.db"
    db_echo: bool = False
    log_level: str = "INFO"
    local_timezone: str = ""

    @classmethod
    def from_env(cls) -> "Settings":
        db_path = os.environ.get("DB_PATH")
        return cls(
            database_url=os.environ.get("DATABASE_URL") or None,
            db_path=Path(db_path) if db_path else cls.db_path,
            db_echo=_env_bool("DB_ECHO"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            local_timezone=os.environ.get("LOCAL_TIMEZONE", "").strip(),
        )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or f"sqlite:///{self.db_path}"

    def tz(self) -> tzinfo | None:
        """Zone used to bucket timestamps by calendar date (None = system local)."""
        if not self.local_timezone:
            return None
        return ZoneInfo(self.local_timezone)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings (tests change the environment between cases)."""
    global _settings
    _settings = None


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level),
        format=LOG_FORMAT,
    )
