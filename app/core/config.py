# app/core/config.py
from __future__ import annotations

import os
from typing import List
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.getenv(env_name)
    if val is None:
        return default
    return str(val).strip().lower() not in {"0", "false", "no", "off", ""}


def _get_int(env_name: str, default: int) -> int:
    try:
        return int(os.getenv(env_name, default))
    except (TypeError, ValueError):
        return default


def _split_csv(env_name: str, default: str = "") -> List[str]:
    raw = os.getenv(env_name, default)
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class Settings(BaseModel):
    # ------------------------- App -------------------------
    APP_NAME: str = os.getenv("APP_NAME", "PBL Gamification Service")
    DEBUG: bool = _get_bool("DEBUG", False)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # ------------------------- DB -------------------------
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///app.db")

    # ------------------------- Seed data -------------------------
    # Achievement catalog loaded on first start when the table is empty
    ACHIEVEMENTS_CSV: str = os.getenv("ACHIEVEMENTS_CSV", "")

    # ------------------------- Pending actions -------------------------
    DEADLINE_WINDOW_DAYS: int = _get_int("DEADLINE_WINDOW_DAYS", 7)
    EVENT_WINDOW_DAYS: int = _get_int("EVENT_WINDOW_DAYS", 3)

    # ------------------------- CORS -------------------------
    # e.g. CORS_ALLOW_ORIGINS="http://localhost:5173,http://127.0.0.1:3000"
    CORS_ALLOW_ORIGINS: List[str] = _split_csv("CORS_ALLOW_ORIGINS", "")

    # ------------------------- Derived flags -------------------------
    @property
    def DB_IS_SQLITE(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite:")

    @property
    def SQLALCHEMY_ECHO(self) -> bool:
        return self.DEBUG

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return self.CORS_ALLOW_ORIGINS or ["*"]


settings = Settings()
