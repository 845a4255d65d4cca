"""Configuration settings for the workout planner API."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]
StorageBackend = Literal["memory", "file", "supabase"]

# Storage keys, one per collection
SCHEDULES_KEY = "workout-schedules"
WORKOUT_LIBRARY_KEY = "workout-library"
WEEK_LIBRARY_KEY = "week-library"
PROGRAM_LIBRARY_KEY = "program-library"
LEGACY_PRESETS_KEY = "workout-presets"


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Storage
    STORAGE_BACKEND: StorageBackend = "memory"
    STORAGE_PATH: str = ".workout_planner_store.json"
    STORAGE_TABLE: str = "client_kv_store"

    # Supabase
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Storage
        backend = os.getenv("STORAGE_BACKEND", "memory").lower()
        if backend in ("memory", "file", "supabase"):
            self.STORAGE_BACKEND = backend  # type: ignore
        else:
            self.STORAGE_BACKEND = "memory"
        self.STORAGE_PATH = os.getenv("STORAGE_PATH", self.STORAGE_PATH)
        self.STORAGE_TABLE = os.getenv("STORAGE_TABLE", self.STORAGE_TABLE)

        # Supabase
        self.SUPABASE_URL = os.getenv("SUPABASE_URL")
        self.SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_ANON_KEY")

        origins = os.getenv("CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]


settings = Settings()
