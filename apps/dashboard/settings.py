from __future__ import annotations

import logging
import os
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_DEV_HOSTS = ["localhost", "127.0.0.1", "::1"]

_KNOWN_DASHBOARD_ENV_KEYS = {
    "DASHBOARD_API_BASE_URL",
    "DASHBOARD_SNAPSHOT_PATH",
    "DASHBOARD_HOLDINGS_PATH",
    "DASHBOARD_ACCOUNT_PATH",
    "DASHBOARD_REQUEST_TIMEOUT_SECONDS",
    "DASHBOARD_MOBILE_BREAKPOINT_PX",
    "DASHBOARD_VIEWPORT_WIDTH",
    "DASHBOARD_VIEWPORT_HEIGHT",
    "DASHBOARD_LOCAL_DEV_HOSTS",
    "DASHBOARD_FALLBACK_PRICES",
}


def _warn_unknown_prefixed_env(prefix: str, known_keys: set[str]) -> None:
    unknown = sorted(key for key in os.environ if key.startswith(prefix) and key not in known_keys)
    if unknown:
        logger.warning("Unknown %s env vars ignored: %s", prefix, ", ".join(unknown))


class DashboardSettings(BaseSettings):
    """Settings for the portfolio dashboard."""

    api_base_url: str = Field(
        default="http://localhost:8000",
        validation_alias=AliasChoices("dashboard_api_base_url", "DASHBOARD_API_BASE_URL", "api_base_url", "API_BASE_URL"),
    )
    snapshot_path: str = Field(
        default="/portfolio",
        validation_alias=AliasChoices("dashboard_snapshot_path", "DASHBOARD_SNAPSHOT_PATH"),
    )
    holdings_path: str = Field(
        default="/portfolio/equities",
        validation_alias=AliasChoices("dashboard_holdings_path", "DASHBOARD_HOLDINGS_PATH"),
    )
    account_path: str = Field(
        default="/portfolio/account",
        validation_alias=AliasChoices("dashboard_account_path", "DASHBOARD_ACCOUNT_PATH"),
    )
    request_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("dashboard_request_timeout_seconds", "DASHBOARD_REQUEST_TIMEOUT_SECONDS"),
    )
    mobile_breakpoint_px: int = Field(
        default=768,
        ge=1,
        validation_alias=AliasChoices("dashboard_mobile_breakpoint_px", "DASHBOARD_MOBILE_BREAKPOINT_PX"),
    )
    viewport_width: int = Field(
        default=1280,
        ge=1,
        validation_alias=AliasChoices("dashboard_viewport_width", "DASHBOARD_VIEWPORT_WIDTH"),
    )
    viewport_height: int = Field(
        default=800,
        ge=1,
        validation_alias=AliasChoices("dashboard_viewport_height", "DASHBOARD_VIEWPORT_HEIGHT"),
    )
    local_dev_hosts: list[str] = Field(
        default_factory=lambda: list(DEFAULT_LOCAL_DEV_HOSTS),
        validation_alias=AliasChoices("dashboard_local_dev_hosts", "DASHBOARD_LOCAL_DEV_HOSTS"),
    )
    fallback_prices: dict[str, float] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("dashboard_fallback_prices", "DASHBOARD_FALLBACK_PRICES"),
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="", extra="ignore")

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("snapshot_path", "holdings_path", "account_path")
    @classmethod
    def _validate_path(cls, value: str) -> str:
        path = value.strip()
        if not path.startswith("/"):
            raise ValueError(f"API paths must start with '/': {value!r}")
        return path

    @field_validator("local_dev_hosts")
    @classmethod
    def _normalize_hosts(cls, value: list[str]) -> list[str]:
        return [host.strip().lower() for host in value if host.strip()]

    @field_validator("fallback_prices")
    @classmethod
    def _normalize_symbols(cls, value: dict[str, float]) -> dict[str, float]:
        return {symbol.strip().upper(): price for symbol, price in value.items()}

    @model_validator(mode="after")
    def _warn(self) -> "DashboardSettings":
        if not self.local_dev_hosts:
            logger.warning("DASHBOARD_LOCAL_DEV_HOSTS is empty; write controls will never be shown")
        if self.viewport_width < self.mobile_breakpoint_px:
            logger.warning(
                "Viewport width %s is below the mobile breakpoint %s; layout is pinned to one column",
                self.viewport_width,
                self.mobile_breakpoint_px,
            )
        _warn_unknown_prefixed_env("DASHBOARD_", _KNOWN_DASHBOARD_ENV_KEYS)
        return self


@lru_cache
def get_settings() -> DashboardSettings:
    """Cached accessor so we only load settings once per process."""
    return DashboardSettings()
