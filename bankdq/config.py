"""
Configuration settings for the banking data quality toolkit.

Uses Pydantic Settings to load environment variables for database connections,
logging, and file locations. Check thresholds live in `QualityConfig`, which is
nested under `Settings.quality` (override with `QUALITY__<FIELD>` variables) and
is always handed to evaluators explicitly.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QualityConfig(BaseModel):
    """
    Thresholds and bounds shared by the quality and reconciliation checks.
    """

    # Validity
    min_age: int = 18
    max_age: int = 120
    amount_ceiling: float = 1_000_000.0

    # Outliers and exception flagging
    outlier_multiplier: float = 1.5
    warning_sigma: float = 1.0
    exception_sigma: float = 2.0

    # Period-over-period
    variance_threshold_pct: float = 10.0

    # Scorecard bands (inclusive lower bounds)
    band_excellent: float = 95.0
    band_good: float = 85.0
    band_fair: float = 70.0
    summary_good_threshold: float = 90.0

    orphan_listing_limit: int = 100

    # Simulated system-to-system split of transaction types
    system_a_types: Tuple[str, ...] = ("Deposit", "Transfer")
    system_b_types: Tuple[str, ...] = ("Withdrawal", "Payment")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ordering(self) -> "QualityConfig":
        if self.min_age > self.max_age:
            raise ValueError("min_age must not exceed max_age")
        if self.amount_ceiling <= 0:
            raise ValueError("amount_ceiling must be positive")
        if not self.band_excellent >= self.band_good >= self.band_fair:
            raise ValueError("band cutoffs must be descending (excellent >= good >= fair)")
        if self.warning_sigma > self.exception_sigma:
            raise ValueError("warning_sigma must not exceed exception_sigma")
        overlap = set(self.system_a_types) & set(self.system_b_types)
        if overlap:
            raise ValueError(f"system buckets must be disjoint, both contain: {sorted(overlap)}")
        return self


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("banking", alias="DB_NAME")
    db_statement_timeout_ms: int = Field(30_000, alias="DB_STATEMENT_TIMEOUT_MS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")
    data_dir: str = Field("data", alias="DATA_DIR")
    results_dir: str = Field("results", alias="RESULTS_DIR")

    # Check thresholds
    quality: QualityConfig = Field(default_factory=QualityConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        populate_by_name=True,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["QualityConfig", "Settings", "get_settings"]
