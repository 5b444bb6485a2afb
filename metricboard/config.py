"""Metricboard — Central Configuration via Pydantic Settings."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Analytics Backend ──
    analytics_api_url: str = "http://localhost:5000"
    request_timeout: float = 5.0  # seconds, per backend call

    # ── Charts ──
    default_reference_year: Optional[int] = None
    default_chart_metric: str = "roi"

    # ── App ──
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @property
    def effective_reference_year(self) -> int:
        """Return the configured chart year, otherwise the current UTC year."""
        if self.default_reference_year:
            return self.default_reference_year
        return datetime.now(timezone.utc).year

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
