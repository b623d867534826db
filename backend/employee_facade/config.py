"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every recognized option has a working default (local mock API on :8112)
    - get_settings() is cached (lru_cache) — single instance per process
    - Out-of-range resilience values are rejected at load time, not at first call

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Durations in ms/seconds as plain numbers: env vars stay readable
      (RETRY_INITIAL_WAIT_MS=500) without a duration parser
    - Policy objects built here, not in the client: core/ stays unaware of env vars
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from employee_facade.core.resilience_policy import RateLimitPolicy, RetryPolicy


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Upstream employee API
    employee_api_base_url: str = "http://localhost:8112/api/v1/employee"
    employee_api_connect_timeout_seconds: float = Field(5.0, gt=0)
    employee_api_read_timeout_seconds: float = Field(10.0, gt=0)
    employee_api_write_timeout_seconds: float = Field(10.0, gt=0)

    @field_validator("employee_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Retry
    retry_max_attempts: int = Field(3, ge=1)
    retry_initial_wait_ms: int = Field(500, ge=0)
    retry_max_wait_ms: int = Field(5000, ge=0)

    # Rate limiter
    rate_limit_permits_per_period: int = Field(10, ge=1)
    rate_limit_refresh_period_ms: int = Field(1000, gt=0)
    rate_limit_timeout_ms: int = Field(5000, ge=0)

    @model_validator(mode="after")
    def check_wait_bounds(self):
        if self.retry_max_wait_ms < self.retry_initial_wait_ms:
            raise ValueError("retry_max_wait_ms must be >= retry_initial_wait_ms")
        return self

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            initial_wait_ms=self.retry_initial_wait_ms,
            max_wait_ms=self.retry_max_wait_ms,
        )

    def rate_limit_policy(self) -> RateLimitPolicy:
        return RateLimitPolicy(
            limit_for_period=self.rate_limit_permits_per_period,
            refresh_period_ms=self.rate_limit_refresh_period_ms,
            timeout_ms=self.rate_limit_timeout_ms,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
