from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Optional

from taskops.config_utils import env_bool, env_int, env_optional_str, env_str, load_timezone


def _default_sqlite_url() -> str:
    app_root = Path(__file__).resolve().parents[1]
    data_dir = app_root / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{(data_dir / 'tasks.db').as_posix()}"


@dataclass(frozen=True)
class DashboardConfig:
    """Runtime configuration for the task operations dashboard.

    DB selection (first non-empty wins):
    - TASKOPS_DATABASE_URL: dashboard-specific DB URL
    - PLATFORM_DATABASE_URL: shared DB URL
    - DATABASE_URL: generic DB URL, e.g. the hosted Postgres instance
    - otherwise a local SQLite file at data/tasks.db

    UI:
    - TASKOPS_PAGE_SIZE: rows per table page (default: 20)
    - TASKOPS_EXPORT_PREFIX: CSV download name prefix (default: ops-tasks)
    - TASKOPS_TIMEZONE: IANA zone for "Today" / month presets and the
      custom range (default: UTC)

    Logging:
    - TASKOPS_LOG_LEVEL (default: INFO)
    - TASKOPS_LOG_DIR: also write taskops.log there when set

    Schema:
    - TASKOPS_INIT_SCHEMA: create the tasks table on startup. Defaults to
      true for SQLite only; the hosted table is managed elsewhere.
    """

    database_url: str
    page_size: int
    export_prefix: str
    log_level: str
    log_dir: Optional[str]
    init_schema: bool
    timezone: str = "UTC"

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        db_url = (
            env_optional_str("TASKOPS_DATABASE_URL")
            or env_optional_str("PLATFORM_DATABASE_URL")
            or env_optional_str("DATABASE_URL")
        )
        if not db_url:
            db_url = _default_sqlite_url()

        return cls(
            database_url=db_url,
            page_size=env_int("TASKOPS_PAGE_SIZE", 20, minimum=1),
            export_prefix=env_str("TASKOPS_EXPORT_PREFIX", "ops-tasks"),
            log_level=env_str("TASKOPS_LOG_LEVEL", "INFO").upper(),
            log_dir=env_optional_str("TASKOPS_LOG_DIR"),
            init_schema=env_bool("TASKOPS_INIT_SCHEMA", db_url.startswith("sqlite:")),
            timezone=env_str("TASKOPS_TIMEZONE", "UTC"),
        )

    @property
    def zone(self) -> tzinfo:
        return load_timezone(self.timezone)


_config: Optional[DashboardConfig] = None


def get_config() -> DashboardConfig:
    """Get the dashboard configuration (cached)."""
    global _config
    if _config is None:
        _config = DashboardConfig.from_env()
    return _config
