"""
Settings for the ledger, read from the environment (and ``.env``).

``STORAGE_*`` variables locate the SQLite database and size its connection
pool; ``LEDGER_*`` variables shape movement numbers and paging.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the ledger database lives and how it is opened."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "slotledger.db"
    pool_size: int = Field(default=5, ge=1, description="Query-only reader connections")
    busy_timeout: int = Field(default=30000, ge=0, description="Milliseconds")

    @field_validator("db_name")
    @classmethod
    def plain_file_name(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError("db_name must be a file name, not a path")
        return v

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class LedgerSettings(BaseSettings):
    """Movement numbering and paging."""

    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    movement_no_prefix: str = Field(default="T", pattern=r"^[A-Z]{1,4}$")
    default_page_size: int = Field(default=20, ge=1, le=500)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "SlotLedger"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def create_data_dir(self) -> "Settings":
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)
        return self

    @property
    def json_logs(self) -> bool:
        return self.environment != "development"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Settings for this process, loaded on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget loaded settings so the next call re-reads the environment."""
    global _settings
    _settings = None
