"""
Habit Engine — Centralized configuration.

Loads all settings from .env and normalizes them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Storage provider: "sqlite" | "json"
    HABIT_STORE: str = "sqlite"

    # SQLite (only used when HABIT_STORE=sqlite)
    DATABASE_PATH: str = "data/habits.db"

    # JSON file (only used when HABIT_STORE=json)
    HABITS_JSON_PATH: str = "data/habits.json"

    LOG_LEVEL: str = "INFO"

    @field_validator("HABIT_STORE", mode="before")
    @classmethod
    def parse_store(cls, v: str) -> str:
        return str(v).strip().lower()

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_level(cls, v: str) -> str:
        return str(v).strip().upper()


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        HABIT_STORE=os.getenv("HABIT_STORE", "sqlite"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/habits.db"),
        HABITS_JSON_PATH=os.getenv("HABITS_JSON_PATH", "data/habits.json"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton, imported by other modules as:
#   from src.config import settings
settings = _load_settings()
