"""Section-header vocabulary for promotional terms documents.

Two concerns live here:
- the set of header phrases the cleaner emphasizes, and the pattern built from
  it (rebuilt per call since each request may add its own phrases)
- rendering of the common headers for a given brand, used by the editor's
  header panel

Rendering takes the brand as an explicit argument; nothing here keeps state.
"""

from __future__ import annotations

from re import Pattern
from typing import Dict, FrozenSet, Iterable, List, Optional
import html
import re

DEFAULT_HEADERS = (
	"DESCRIPTION OF PROMOTION",
	"PROMOTIONAL PERIOD",
	"ELIGIBILITY",
	"ACTION REQUIRED",
	"CLAIMING PROMOTIONAL OFFER",
	"REGISTRATION PROCEDURES",
	"LIMITATIONS ON PARTICIPATION",
	"WAGERING REQUIREMENTS/EXCLUSIONS",
	"ORDER OF FUNDS USED FOR WAGERING",
	"ELIGIBLE GAMES",
	"RESTRICTIONS ON WITHDRAWALS",
	"CANCELLATION",
	"GAMBLING PROBLEM",
	"IMPORTANT TERMS",
)

# Display-case titles shown in the header panel
COMMON_HEADERS = (
	"Description of Promotion",
	"Promotional Period",
	"Eligibility",
	"Action Required",
	"Claiming Promotional Offer",
	"Registration Procedures",
	"Limitations on Participation",
	"Wagering Requirements / Exclusions",
	"Order of Funds Used for Wagering",
	"Eligible Games",
	"Restrictions on Withdrawals",
	"Cancellation",
	"Gambling Problem",
	"Important Terms",
)

CAPS_UNDERLINE_BRANDS = frozenset({"MS", "BS"})
TITLE_CASE_BRANDS = frozenset({"MC", "MP", "BC", "BP", "PC", "PP", "WOF"})
BRANDS = tuple(sorted(CAPS_UNDERLINE_BRANDS | TITLE_CASE_BRANDS))

_STYLE_CLASSES: Dict[str, str] = {
	"caps_underline": "underline font-bold text-lg tracking-wide mb-2",
	"title_case": "font-bold text-lg mb-2",
	"plain": "font-semibold mb-2",
}

_WORD_START_RE = re.compile(r"\b\w")


def _fold(phrase: str) -> str:
	return " ".join(str(phrase or "").split()).upper()


def build_header_set(extra_phrases: Optional[Iterable[str]] = None) -> FrozenSet[str]:
	"""Union of the built-in headers and `extra_phrases`, upper-cased."""
	phrases = set(DEFAULT_HEADERS)
	for phrase in extra_phrases or ():
		folded = _fold(phrase)
		if folded:
			phrases.add(folded)
	return frozenset(phrases)


def build_header_pattern(extra_phrases: Optional[Iterable[str]] = None) -> Pattern[str]:
	"""Pattern matching a paragraph whose whole text is a header phrase.

	Groups: 1 = opening `<p>` with any attributes plus whitespace, 2 = the
	phrase, 3 = whitespace plus closing `</p>`. Phrases are escaped before
	interpolation.
	"""
	phrases = sorted(build_header_set(extra_phrases), key=lambda p: (-len(p), p))
	alternation = "|".join(re.escape(p) for p in phrases)
	return re.compile(rf"(<p(?:\s[^>]*)?>\s*)({alternation})(\s*</p>)", re.IGNORECASE)


def header_style(brand: Optional[str]) -> str:
	b = (brand or "").strip().upper()
	if b in CAPS_UNDERLINE_BRANDS:
		return "caps_underline"
	if b in TITLE_CASE_BRANDS:
		return "title_case"
	return "plain"


def _title_case(text: str) -> str:
	return _WORD_START_RE.sub(lambda m: m.group(0).upper(), text.lower())


def render_header(text: str, brand: Optional[str]) -> str:
	style = header_style(brand)
	if style == "caps_underline":
		shown = text.upper()
	elif style == "title_case":
		shown = _title_case(text)
	else:
		shown = text
	return f'<h4 class="{_STYLE_CLASSES[style]}">{html.escape(shown, quote=False)}</h4>'


def render_common_headers(brand: Optional[str]) -> List[str]:
	return [render_header(h, brand) for h in COMMON_HEADERS]
