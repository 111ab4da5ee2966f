"""Application-specific configuration.

Business settings (pricing and delivery scheduling) kept separate from the
infrastructure configuration in config.py.
"""

from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


class AppEnvironment(BaseSettings):
    """Raw environment variable loading for app-specific settings."""

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    YEARLY_DISCOUNT_PERCENT: Decimal = Field(default=Decimal("10"))
    DEFAULT_DELIVERY_DAYS: int = Field(default=7)
    DELIVERY_TIMEZONE: str = Field(default="Asia/Karachi")


class AppSettings(BaseModel):
    """Application-specific settings."""

    model_config = ConfigDict(from_attributes=True)

    yearly_discount_percent: Decimal = Field(default=Decimal("10"), ge=0, le=100)
    default_delivery_days: int = Field(default=7, ge=1)
    delivery_timezone: str = "Asia/Karachi"

    @property
    def yearly_discount_rate(self) -> Decimal:
        return self.yearly_discount_percent / Decimal(100)

    @classmethod
    def load(cls, env: "AppEnvironment | None" = None) -> "AppSettings":
        """Load app settings from environment variables."""
        if env is None:
            env = AppEnvironment()
        return cls(
            yearly_discount_percent=env.YEARLY_DISCOUNT_PERCENT,
            default_delivery_days=env.DEFAULT_DELIVERY_DAYS,
            delivery_timezone=env.DELIVERY_TIMEZONE,
        )
