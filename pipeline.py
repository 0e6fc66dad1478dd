from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
import logging

from adapters import (
	ALLOWED_ATTRIBUTES,
	FORMAT,
	SANITIZE,
	AdapterError,
	Formatter,
	Sanitizer,
	SoupFormatter,
	SoupSanitizer,
)
from cleaner import clean_html
from env import get_extra_headers

logger = logging.getLogger(__name__)


class InputError(ValueError):
	pass


@dataclass
class CleanRunResult:
	cleaned: str
	formatted: str
	counts: Dict[str, int] = field(default_factory=dict)


def _merge_headers(headers: Optional[Iterable[str]]) -> List[str]:
	merged: List[str] = []
	for h in list(get_extra_headers()) + list(headers or ()):
		if isinstance(h, str) and h.strip() and h not in merged:
			merged.append(h)
	return merged


def run_clean(
	html: Optional[str],
	headers: Optional[Iterable[str]] = None,
	*,
	sanitizer: Optional[Sanitizer] = None,
	formatter: Optional[Formatter] = None,
	format_output: bool = True,
) -> CleanRunResult:
	"""Sanitize, clean and pretty-print one document.

	Raises `InputError` for a missing/empty document (before any adapter runs)
	and `AdapterError` when the sanitizer or formatter fails. A format failure
	carries the cleaned document on `AdapterError.cleaned`.
	With `format_output=False` the formatter is skipped and `formatted` is the
	cleaned document.
	"""
	if not html or not html.strip():
		raise InputError("No HTML provided")
	sanitizer = sanitizer if sanitizer is not None else SoupSanitizer()
	formatter = formatter if formatter is not None else SoupFormatter()
	extra = _merge_headers(headers)

	try:
		sanitized = sanitizer.sanitize(html, ALLOWED_ATTRIBUTES)
	except AdapterError:
		raise
	except Exception as exc:
		raise AdapterError(SANITIZE, f"Failed to sanitize HTML: {exc}") from exc

	cleaned = clean_html(sanitized, extra)

	if not format_output:
		formatted = cleaned
	else:
		try:
			formatted = formatter.format(cleaned)
		except AdapterError as exc:
			exc.cleaned = cleaned
			raise
		except Exception as exc:
			raise AdapterError(FORMAT, f"Failed to format HTML: {exc}", cleaned=cleaned) from exc

	logger.info("clean run: %d -> %d chars (%d extra headers)", len(html), len(cleaned), len(extra))
	return CleanRunResult(
		cleaned=cleaned,
		formatted=formatted,
		counts={
			"input_chars": len(html),
			"sanitized_chars": len(sanitized),
			"cleaned_chars": len(cleaned),
			"formatted_chars": len(formatted),
			"extra_headers": len(extra),
		},
	)
