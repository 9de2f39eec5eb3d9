"""
backend/app/config.py

Purpose:
    Central settings loading for the wagerbook backend.

Dependencies:
    - pydantic-settings
    - pathlib
"""

from pathlib import Path

from pydantic_settings import BaseSettings

# Prefer backend/.env, fallback to project-root .env.
_BACKEND_ENV_FILE = Path(__file__).resolve().parent.parent / ".env"
_ROOT_ENV_FILE = Path(__file__).resolve().parent.parent.parent / ".env"


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "wagerbook"
    # Requires a replica set; standalone servers reject multi-document transactions.
    MONGO_TRANSACTIONS_ENABLED: bool = False
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Sports offered by the bet screen
    SPORTS: str = "MLB,NHL,NBA,WNBA,NFL"

    # Ledger reporting
    ROLLING_WINDOW_HOURS: int = 24

    model_config = {
        "env_file": (str(_BACKEND_ENV_FILE), str(_ROOT_ENV_FILE)),
        "extra": "ignore",
    }

    @property
    def sports(self) -> list[str]:
        return [s.strip() for s in self.SPORTS.split(",") if s.strip()]


settings = Settings()
