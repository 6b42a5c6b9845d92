"""
Application configuration: loaded from environment / .env file.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ──
    app_name: str = "appsec-scoring-engine"
    app_env: str = "development"
    log_level: str = "INFO"
    scoring_model_version: str = "1.0"

    # ── Scoring tables ──
    # Directory holding integrationLevels.json, toolQuality.json, riskFactors.json.
    # Unset → tables bundled with the package.
    scoring_tables_dir: Optional[str] = None

    # ── CORS (portfolio UI) ──
    cors_allow_origins: list[str] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
