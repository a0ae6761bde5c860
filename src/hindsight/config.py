from __future__ import annotations

from datetime import date

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hindsight.domain.models import MissingDataPolicy


class Settings(BaseSettings):
    """Environment-backed runtime settings."""

    app_name: str = "Hindsight"
    log_level: str = "INFO"
    tickers: str = "AAL,DAL,UAL,LUV,HA"
    start: date = date(2023, 1, 1)
    end: date = date(2023, 2, 1)
    interval: str = "1d"
    missing_data_policy: MissingDataPolicy = MissingDataPolicy.DROP
    initial_capital: float = Field(default=1_000_000, gt=0)

    @model_validator(mode="after")
    def _check_window(self) -> Settings:
        if self.end < self.start:
            raise ValueError("end must not be before start")
        return self

    @property
    def symbols(self) -> list[str]:
        return parse_symbols(self.tickers)

    model_config = SettingsConfigDict(
        env_prefix="HINDSIGHT_",
        env_file=".env",
        env_file_encoding="utf-8-sig",
        extra="ignore",
    )


def parse_symbols(raw: str) -> list[str]:
    return [s.strip().upper() for s in raw.split(",") if s.strip()]
