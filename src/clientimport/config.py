# src/clientimport/config.py
"""
Runtime settings, read from the environment (and `.env`, loaded by the CLI).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

DEFAULT_BASE_URL = "http://app.e-kontroll.com.br/api"

# No timeout was ever pinned down for the roster call; 20s matches our other
# HTTP reads and keeps a stuck fetch from blocking the operator for long.
DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str
    timeout: float
    max_attempts: int
    demo_tokens: Tuple[str, ...]
    store: str
    sheet_id: Optional[str]
    worksheet: str
    service_account_file: str

    @property
    def demo_mode(self) -> bool:
        return bool(self.demo_tokens)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.") from None
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {raw!r}.")
    return value


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.") from None
    if value < 1:
        raise RuntimeError(f"{name} must be at least 1, got {raw!r}.")
    return value


def _get_list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def load_settings() -> Settings:
    store = os.getenv("CLIENT_STORE", "memory").strip().lower()
    if store not in {"memory", "sheets"}:
        raise RuntimeError(f"CLIENT_STORE must be 'memory' or 'sheets', got {store!r}.")

    return Settings(
        api_key=os.getenv("EKONTROLL_API_KEY", ""),
        base_url=os.getenv("EKONTROLL_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout=_get_float("EKONTROLL_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        max_attempts=_get_int("EKONTROLL_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
        demo_tokens=_get_list("EKONTROLL_DEMO_TOKENS"),
        store=store,
        sheet_id=os.getenv("CLIENTS_SHEET_ID") or None,
        worksheet=os.getenv("CLIENTS_WORKSHEET", "Clientes"),
        service_account_file=os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE", "service_account.json"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings for the running process."""
    return load_settings()
