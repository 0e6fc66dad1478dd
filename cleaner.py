"""Deterministic terms-and-conditions HTML cleaner.

Runs the ordered rule table from `rules` over a document exactly once, left to
right. Every rule is a plain regex substitution, so the cleaner tolerates
malformed markup and never raises on any string input. A single pass is not a
fixed point: corrections that a later rule makes possible are not revisited.

Functions:
- clean_html(document: str, extra_headers: list[str]) -> str
- clean_html_file(path: Path, extra_headers: list[str]) -> str
"""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Sequence
import logging

from rules import Rule, build_rule_table

logger = logging.getLogger(__name__)


def apply_rules(document: str, table: Sequence[Rule]) -> str:
	out = document
	for rule in table:
		out = rule.apply(out)
	return out


def clean_html(document: Optional[str], extra_headers: Optional[Iterable[str]] = None) -> str:
	if not document:
		return ""
	table = build_rule_table(list(extra_headers or ()))
	out = apply_rules(document, table).strip()
	logger.debug("cleaned document: %d rules, %d -> %d chars", len(table), len(document), len(out))
	return out


def clean_html_file(path: Path, extra_headers: Optional[Iterable[str]] = None) -> str:
	p = Path(path)
	if not p.exists():
		raise FileNotFoundError(str(p))
	raw = p.read_text(encoding="utf-8")
	return clean_html(raw, extra_headers)
