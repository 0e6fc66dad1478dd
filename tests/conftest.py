"""
Shared fixtures for the cleaner tests.

- Isolated observability root per test (events/counters land in tmp_path)
- FastAPI TestClient for the HTTP surface
- Recording fake adapters for pipeline tests
"""

from typing import Iterable, List

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep every test away from the real data root and ambient settings."""
    monkeypatch.setenv("CLEANER_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("OBSERVABILITY_ROOT", str(tmp_path / "observability"))
    monkeypatch.delenv("CLEANER_EXTRA_HEADERS", raising=False)
    monkeypatch.delenv("CLEANER_FORMAT_INDENT", raising=False)
    monkeypatch.delenv("CLEANER_DEBOUNCE_MS", raising=False)
    monkeypatch.delenv("CLEANER_DEFAULT_BRAND", raising=False)
    return tmp_path


@pytest.fixture
def client() -> TestClient:
    from api import app

    return TestClient(app)


class RecordingSanitizer:
    """Pass-through sanitizer that remembers its calls."""

    def __init__(self):
        self.calls: List[str] = []

    def sanitize(self, html: str, allowed_attributes: Iterable[str]) -> str:
        self.calls.append(html)
        return html


class RecordingFormatter:
    """Formatter that wraps output in a marker and remembers its calls."""

    def __init__(self):
        self.calls: List[str] = []

    def format(self, html: str) -> str:
        self.calls.append(html)
        return f"[{html}]"


class BrokenFormatter:
    def format(self, html: str) -> str:
        raise RuntimeError("cannot parse")


class BrokenSanitizer:
    def sanitize(self, html: str, allowed_attributes: Iterable[str]) -> str:
        raise ValueError("bad markup")


@pytest.fixture
def sanitizer() -> RecordingSanitizer:
    return RecordingSanitizer()


@pytest.fixture
def formatter() -> RecordingFormatter:
    return RecordingFormatter()


@pytest.fixture
def broken_formatter() -> BrokenFormatter:
    return BrokenFormatter()


@pytest.fixture
def broken_sanitizer() -> BrokenSanitizer:
    return BrokenSanitizer()
