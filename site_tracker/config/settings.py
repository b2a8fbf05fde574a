"""
Settings Management with Pydantic

Provides type-safe configuration management with:
- Environment variable support
- Validation of threshold ordering
- One configuration class per concern
"""

from typing import Optional
from functools import lru_cache
import logging

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ThresholdConfig(BaseSettings):
    """Status classification thresholds on monthly progress (percent)."""
    model_config = SettingsConfigDict(
        env_prefix="THRESHOLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    critical_below: float = 30.0
    problematic_below: float = 50.0

    # Baseline monthly increment of the schedule
    normal_rate: float = 12.5

    # Valid progress domain; anything outside is treated as missing data
    min_progress: float = 0.0
    max_progress: float = 100.0

    @model_validator(mode="after")
    def _check_ordering(self) -> "ThresholdConfig":
        if self.critical_below > self.problematic_below:
            raise ValueError("critical_below must not exceed problematic_below")
        if self.min_progress > self.max_progress:
            raise ValueError("min_progress must not exceed max_progress")
        return self


class DemobilizationConfig(BaseSettings):
    """Cumulative progress thresholds for the first four months of a site."""
    model_config = SettingsConfigDict(
        env_prefix="DEMOBILIZATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    alert_below: float = 50.0  # month 1
    pre_demobilization_below: float = 30.0  # month 2
    demobilization_below: float = 30.0  # month 3
    final_review_below: float = 50.0  # month 4, only when month 3 recovered


class DataEntryConfig(BaseSettings):
    """Data entry timeliness."""
    model_config = SettingsConfigDict(
        env_prefix="DATA_ENTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    delay_threshold_days: int = Field(default=35, ge=0)

    # Day of month after which a missing current-month entry is flagged
    grace_day_of_month: int = Field(default=5, ge=0, le=31)


class NotificationConfig(BaseSettings):
    """Alert delivery configuration."""
    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    enabled: bool = False
    fallback_recipient: str = "admin@sitetracker.com"
    sender: str = "alerts@sitetracker.com"

    # SMTP
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[SecretStr] = Field(default=None, alias="SMTP_PASSWORD")
    use_tls: bool = True
    timeout: int = 10


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application
    app_name: str = "Site Tracker"
    debug: bool = False
    log_level: str = "INFO"

    # Sub-configurations
    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    demobilization: DemobilizationConfig = Field(default_factory=DemobilizationConfig)
    data_entry: DataEntryConfig = Field(default_factory=DataEntryConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            thresholds=ThresholdConfig(),
            demobilization=DemobilizationConfig(),
            data_entry=DataEntryConfig(),
            notification=NotificationConfig()
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()


def configure_logging(settings: Settings = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
