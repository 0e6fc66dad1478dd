from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import os

BASE_DIR = Path(__file__).resolve().parent


def _env_path(name: str) -> Optional[Path]:
	raw = os.environ.get(name)
	if not raw or not str(raw).strip():
		return None
	return Path(str(raw)).expanduser().resolve()


def _env_int(name: str, default: int) -> int:
	raw = (os.getenv(name) or "").strip()
	if not raw:
		return default
	try:
		return int(raw)
	except Exception:
		return default


def get_cleaner_data_root() -> Path:
	"""Base data root for all cleaner artifacts."""
	root = _env_path("CLEANER_DATA_ROOT")
	if root is not None:
		return root
	return BASE_DIR / "data"


def get_observability_root() -> Path:
	root = _env_path("OBSERVABILITY_ROOT")
	if root is not None:
		return root
	return get_cleaner_data_root() / "observability"


def get_extra_headers() -> List[str]:
	"""Header phrases recognized on every request, `|`-separated."""
	raw = os.getenv("CLEANER_EXTRA_HEADERS") or ""
	return [p.strip() for p in raw.split("|") if p.strip()]


def get_format_indent(default: int = 2) -> int:
	value = _env_int("CLEANER_FORMAT_INDENT", default)
	if value < 0:
		return default
	return value


def get_debounce_ms(default: int = 300) -> int:
	value = _env_int("CLEANER_DEBOUNCE_MS", default)
	if value < 0:
		return default
	return value


def get_log_level(default: str = "INFO") -> str:
	raw = (os.getenv("CLEANER_LOG_LEVEL") or "").strip().upper()
	return raw or default


def get_default_brand(default: str = "MC") -> str:
	raw = (os.getenv("CLEANER_DEFAULT_BRAND") or "").strip().upper()
	return raw or default
