"""Sanitizer and pretty-printer adapters.

The cleaner only rewrites text; it relies on two collaborators around it:
- a sanitizer that runs first, so the rules only ever see an allow-listed
  tag/attribute vocabulary
- a pretty-printer that runs last and indents the cleaned markup

Both are pluggable through small protocols. The default implementations use
BeautifulSoup. Any failure inside an adapter is raised as `AdapterError`
naming the stage that failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol
import logging
import re

from bs4 import BeautifulSoup, Comment
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from env import get_format_indent

logger = logging.getLogger(__name__)

ALLOWED_ATTRIBUTES = ("class", "href", "src", "alt", "title", "align")

SANITIZE = "sanitize"
FORMAT = "format"

# Elements removed together with their content
_DROP_TAGS = (
	"script",
	"style",
	"iframe",
	"object",
	"embed",
	"applet",
	"form",
	"input",
	"button",
	"textarea",
	"select",
	"option",
	"link",
	"meta",
	"base",
	"svg",
	"math",
	"template",
	"noscript",
	"frame",
	"frameset",
)

_URL_ATTRS = ("href", "src")
_UNSAFE_URL_RE = re.compile(r"^\s*(?:javascript|vbscript|data):", re.IGNORECASE)


class AdapterError(RuntimeError):
	def __init__(self, stage: str, message: str, *, cleaned: Optional[str] = None):
		super().__init__(message)
		self.stage = stage
		self.cleaned = cleaned


class Sanitizer(Protocol):
	def sanitize(self, html: str, allowed_attributes: Iterable[str]) -> str:
		"""Return `html` with disallowed elements and attributes removed."""


class Formatter(Protocol):
	def format(self, html: str) -> str:
		"""Return `html` indented for reading."""


@dataclass
class SoupSanitizer:
	"""Allow-list sanitizer on top of BeautifulSoup's `html.parser`."""

	parser: str = "html.parser"

	def sanitize(self, html: str, allowed_attributes: Iterable[str] = ALLOWED_ATTRIBUTES) -> str:
		allowed = {a.lower() for a in allowed_attributes}
		try:
			soup = BeautifulSoup(html, self.parser)
			for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
				comment.extract()
			for tag in soup.find_all(list(_DROP_TAGS)):
				if not tag.decomposed:
					tag.decompose()
			for tag in soup.find_all(True):
				for name in list(tag.attrs):
					key = name.lower()
					if key not in allowed:
						del tag.attrs[name]
						continue
					if key in _URL_ATTRS and _UNSAFE_URL_RE.match(str(tag.attrs[name])):
						del tag.attrs[name]
			return str(soup)
		except Exception as exc:
			logger.warning("sanitizer failed: %s", exc)
			raise AdapterError(SANITIZE, f"Failed to sanitize HTML: {exc}") from exc


@dataclass
class SoupFormatter:
	"""Pretty-printer: BeautifulSoup `prettify` re-encoding named entities."""

	indent: int = None  # type: ignore[assignment]
	parser: str = "html.parser"

	def __post_init__(self) -> None:
		if self.indent is None:
			self.indent = get_format_indent()

	def format(self, html: str) -> str:
		try:
			formatter = HTMLFormatter(entity_substitution=EntitySubstitution.substitute_html, indent=self.indent)
			soup = BeautifulSoup(html, self.parser)
			return soup.prettify(formatter=formatter)
		except Exception as exc:
			logger.warning("formatter failed: %s", exc)
			raise AdapterError(FORMAT, f"Failed to format HTML: {exc}") from exc
