"""Application configuration helpers."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataPaths(BaseModel):
    """Filesystem locations for persisted scanner state."""

    state: Path = Field(default=Path("data/state"))

    def ensure(self) -> None:
        """Create directories if they do not exist."""

        self.state.mkdir(parents=True, exist_ok=True)


class AppSettings(BaseSettings):
    """Project-wide settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    fyers_api_base_url: str = Field(
        default="https://api-t1.fyers.in", alias="FYERS_API_BASE_URL")
    fyers_request_timeout: int = Field(
        default=15, gt=0, alias="FYERS_REQUEST_TIMEOUT")
    fyers_rate_limit_per_minute: int = Field(
        default=180, ge=0, alias="FYERS_RATE_LIMIT_PER_MINUTE")
    scan_cooldown_seconds: float = Field(
        default=60.0, ge=0, alias="SCAN_COOLDOWN_SECONDS")
    scan_max_workers: int = Field(default=8, gt=0, alias="SCAN_MAX_WORKERS")
    candle_resolution: str = Field(default="5", alias="CANDLE_RESOLUTION")
    itm_strike_count: int = Field(default=2, ge=0, alias="ITM_STRIKE_COUNT")
    exchange_timezone: str = Field(
        default="Asia/Kolkata", alias="EXCHANGE_TIMEZONE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: Path | None = Field(default=None, alias="LOG_DIR")
    data_paths: DataPaths = Field(default_factory=DataPaths)
