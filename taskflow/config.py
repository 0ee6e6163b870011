"""Runtime configuration for taskflow, read from the environment (and a `.env` file)."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from taskflow.models.constants import DEFAULT_STATUS_SWEEP_MINUTES

load_dotenv()

DEFAULT_DATA_DIR = "~/.task-management-app"
STORAGE_BACKENDS = ("memory", "json", "sqlite")


class AppConfig(BaseModel):
    """Application settings resolved once at start-up."""

    storage_backend: str = Field("json", description="memory | json | sqlite")
    data_dir: Path = Field(Path(DEFAULT_DATA_DIR).expanduser())
    json_path: Optional[Path] = None
    database_url: Optional[str] = None
    notifications_path: Optional[Path] = None
    status_sweep_minutes: int = Field(DEFAULT_STATUS_SWEEP_MINUTES, ge=1)
    log_level: str = "INFO"
    debug: bool = False

    @property
    def resolved_json_path(self) -> Path:
        return self.json_path or self.data_dir / "tasks.json"

    @property
    def resolved_database_url(self) -> str:
        return self.database_url or f"sqlite:///{self.data_dir / 'tasks.db'}"

    @property
    def resolved_notifications_path(self) -> Path:
        return self.notifications_path or self.data_dir / "notifications.json"


def _optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value).expanduser() if value else None


def get_config() -> AppConfig:
    """Build the configuration from environment variables."""
    backend = os.getenv("TASKFLOW_STORAGE", "json").lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"TASKFLOW_STORAGE must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}")

    return AppConfig(
        storage_backend=backend,
        data_dir=Path(os.getenv("TASKFLOW_DATA_DIR", DEFAULT_DATA_DIR)).expanduser(),
        json_path=_optional_path("TASKFLOW_JSON_PATH"),
        database_url=os.getenv("DATABASE_URL") or None,
        notifications_path=_optional_path("TASKFLOW_NOTIFICATIONS_PATH"),
        status_sweep_minutes=int(os.getenv("TASKFLOW_STATUS_SWEEP_MINUTES", str(DEFAULT_STATUS_SWEEP_MINUTES))),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        debug=os.getenv("DEBUG", "False").lower() == "true",
    )
