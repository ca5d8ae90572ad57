# fleet_monitor/core/config.py
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    model_config = {
        "protected_namespaces": (),
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    # DB
    # DATABASE_URL wins; otherwise Postgres from parts if DB_HOST is set, else SQLite at DB_PATH
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 5432
    DB_NAME: str = "pm_db"
    DB_USER: str = "pm_user"
    DB_PASS: str = "pm_pass"
    DB_PATH: str = "./maintenance.db"

    # CORS for the dashboard dev server, comma-separated
    CORS_ORIGINS: str = "http://localhost:5173"

    # Simulation
    SEED_ON_STARTUP: bool = True
    SIMULATE_ON_STARTUP: bool = True
    SIMULATION_SEED: Optional[int] = Field(None, description="Seed for the shared RNG, random if unset")

    # App
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache()
def get_settings():
    return Settings()
