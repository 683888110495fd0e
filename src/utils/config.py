# src/utils/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(key)
    return v if v is not None and v != "" else default


def _env_bool(key: str, default: bool) -> bool:
    v = _env(key)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class ProjectPaths:
    root: Path
    package_dir: Path
    data_dir: Path
    customers_json: Path
    sample_quotes_json: Path


def get_project_root() -> Path:
    """
    Resolve repo root robustly.
    Assumes this file lives at: <root>/src/utils/config.py
    """
    return Path(__file__).resolve().parents[2]


def get_paths() -> ProjectPaths:
    root = get_project_root()
    package_dir = root / "src"
    data_dir = package_dir / "data"
    return ProjectPaths(
        root=root,
        package_dir=package_dir,
        data_dir=data_dir,
        customers_json=data_dir / "customers.json",
        sample_quotes_json=data_dir / "sample_quotes.json",
    )


@dataclass(frozen=True)
class Settings:
    client_id: str
    client_secret: str
    jwt_secret: str
    token_ttl_seconds: int
    cors_origins: tuple[str, ...]
    log_level: str
    customers_path: Optional[str]
    seed_sample_quotes: bool
    public_base_url: str


def load_settings() -> Settings:
    """
    Build settings from environment variables.
    Defaults keep local runs and tests frictionless.

    Env:
      CLIENT_ID / CLIENT_SECRET (default: demo-client / demo-secret)
      JWT_SECRET          (default: dev-jwt-secret-change-me)
      TOKEN_TTL_SECONDS   (default: 3600)
      CORS_ORIGINS        (comma separated, default: *)
      LOG_LEVEL           (default: INFO)
      CUSTOMERS_PATH      (optional roster JSON override)
      SEED_SAMPLE_QUOTES  (default: true)
      PUBLIC_BASE_URL     (default: http://localhost:8000)
    """
    origins = _env("CORS_ORIGINS", "*") or "*"
    return Settings(
        client_id=_env("CLIENT_ID", "demo-client") or "demo-client",
        client_secret=_env("CLIENT_SECRET", "demo-secret") or "demo-secret",
        jwt_secret=_env("JWT_SECRET", "dev-jwt-secret-change-me") or "dev-jwt-secret-change-me",
        token_ttl_seconds=int(_env("TOKEN_TTL_SECONDS", "3600") or "3600"),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        customers_path=_env("CUSTOMERS_PATH", None),
        seed_sample_quotes=_env_bool("SEED_SAMPLE_QUOTES", True),
        public_base_url=(_env("PUBLIC_BASE_URL", "http://localhost:8000") or "http://localhost:8000").rstrip("/"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
