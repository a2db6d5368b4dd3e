"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'data' / 'tradejournal.db'}"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]  # Next.js dev server

    # Analytics
    initial_equity: float = 10000.0
    default_page_size: int = 20

    # Mock trade source
    seed_mock_data: bool = True
    mock_trade_count: int = 200
    mock_seed: int = 12345

    # Solana network label reported by the health check
    network: str = "mainnet-beta"

    model_config = {"env_prefix": "TJ_", "env_file": ".env"}


settings = Settings()
