from __future__ import annotations

import datetime as dt
from typing import List

import pytest

from clientimport.clients.ekontroll import DemoSource
from clientimport.config import get_settings
from clientimport.models import CandidateRecord

DEMO_TOKEN = "demo-token-for-tests"


class RecordingSource:
    """CandidateSource that remembers every credential it was asked about."""

    def __init__(self, candidates: List[CandidateRecord] | None = None) -> None:
        self.candidates = candidates or []
        self.calls: List[str] = []

    def fetch(self, credential: str) -> List[CandidateRecord]:
        self.calls.append(credential)
        return list(self.candidates)


@pytest.fixture
def demo_source() -> DemoSource:
    return DemoSource([DEMO_TOKEN], delay=0)


@pytest.fixture
def fixed_today() -> dt.date:
    return dt.date(2025, 3, 14)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "EKONTROLL_API_KEY",
        "EKONTROLL_BASE_URL",
        "EKONTROLL_TIMEOUT",
        "EKONTROLL_MAX_ATTEMPTS",
        "EKONTROLL_DEMO_TOKENS",
        "CLIENT_STORE",
        "CLIENTS_SHEET_ID",
        "CLIENTS_WORKSHEET",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
