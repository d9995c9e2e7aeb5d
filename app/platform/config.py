from pathlib import Path
from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Lighthouse Audit API"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    CORS_ORIGINS: List[str] = ["*"]

    # ── PageSpeed Insights ──────────────────────
    PSI_API_KEY: str = ""
    PSI_API_URL: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    # Value shipped in .env.example; treated the same as a missing key
    PSI_PLACEHOLDER_API_KEY: str = "your_pagespeed_insights_api_key_here"
    PSI_TIMEOUT_SECONDS: float = 60.0

    # ── Logging ─────────────────────────────────
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
