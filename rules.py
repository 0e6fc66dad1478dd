"""Ordered rewrite rules for editor-generated terms-and-conditions HTML.

Each rule is a compiled pattern plus a replacement (a `re` template or a
function of the match). Rules are applied in table order, each one globally
over the output of the previous one. The order is load-bearing:
- spacing is normalized before anything that expects single spaces
- empty paragraphs/items are pruned before list conversion and header emphasis
- line breaks are removed before the colon rules insert their own `<br/>`

All patterns work on raw markup text; nothing here parses the document.
"""

from __future__ import annotations

from dataclasses import dataclass
from re import Match, Pattern
from typing import Callable, Dict, List, Optional, Tuple, Union
import re

from headers import build_header_pattern

Replacement = Union[str, Callable[[Match[str]], str]]

WHITESPACE = "whitespace"
STRUCTURE = "structure"
TYPOGRAPHY = "typography"
SPELLING = "spelling"
PRUNING = "pruning"
LISTS = "lists"
HEADERS = "headers"
MARKUP = "markup"
PUNCTUATION = "punctuation"
INDENTATION = "indentation"
COALESCING = "coalescing"

CATEGORIES = (
	WHITESPACE,
	STRUCTURE,
	TYPOGRAPHY,
	SPELLING,
	PRUNING,
	LISTS,
	HEADERS,
	MARKUP,
	PUNCTUATION,
	INDENTATION,
	COALESCING,
)


@dataclass(frozen=True)
class Rule:
	name: str
	category: str
	pattern: Pattern[str]
	replacement: Replacement

	def apply(self, document: str) -> str:
		return self.pattern.sub(self.replacement, document)


def _rule(name: str, category: str, pattern: str, replacement: Replacement, flags: int = 0) -> Rule:
	return Rule(name=name, category=category, pattern=re.compile(pattern, flags), replacement=replacement)


_ENTITIES: Dict[str, str] = {
	"«": "&laquo;",
	"»": "&raquo;",
	"—": "&mdash;",
	"–": "&ndash;",
	"“": "&ldquo;",
	"”": "&rdquo;",
	"‘": "&lsquo;",
	"’": "&rsquo;",
	"…": "&hellip;",
}

# Inline wrappers an editor leaves behind in otherwise empty blocks
_EMPTY_INLINE = r"(?:</?(?:strong|b|u|em|i|s|span)\b[^>]*>\s*|<br\s*/?>\s*)*"
# Any run of text that does not cross a paragraph boundary
_NO_PARAGRAPH = r"(?:(?!</?p\b).)*?"
# Opening paragraph tag, with or without attributes
_P_OPEN = r"<p(?:\s[^>]*)?>"


def _typographic_entity(m: Match[str]) -> str:
	return _ENTITIES[m.group(0)]


def _fix_teh(m: Match[str]) -> str:
	word = m.group(0)
	if word.isupper():
		return "THE"
	if word[0].isupper():
		return "The"
	return "the"


def _terminate_item(m: Match[str]) -> str:
	text = m.group(1).strip()
	if not text.endswith("."):
		text += "."
	return f"<li>{text}</li>"


_LEADING_RULES: Tuple[Rule, ...] = (
	# 1. whitespace and space entities
	_rule("normalize_spaces", WHITESPACE, r"&nbsp;|[\u00a0\u200b-\u200d\ufeff\u2000-\u200a\u202f\u205f\u3000]", " "),
	_rule("collapse_spaces", WHITESPACE, r"\s{2,}", " "),
	_rule("join_lines", WHITESPACE, r"\n\s*", ""),
	# 2. table and block structure
	_rule("drop_colgroups", STRUCTURE, r"<colgroup\b[^>]*>.*?</colgroup>", "", re.IGNORECASE | re.DOTALL),
	_rule("strip_cell_spans", STRUCTURE, r"\s(?:colspan|rowspan)=[\"']\d+[\"']", "", re.IGNORECASE),
	_rule(
		"unwrap_cell_paragraphs",
		STRUCTURE,
		rf"<(t[dh])(\s[^>]*)?>\s*{_P_OPEN}({_NO_PARAGRAPH})</p>\s*</\1>",
		r"<\g<1>\g<2>>\g<3></\g<1>>",
		re.IGNORECASE,
	),
	_rule(
		"unwrap_item_paragraphs",
		STRUCTURE,
		rf"<li(\s[^>]*)?>\s*{_P_OPEN}({_NO_PARAGRAPH})</p>\s*</li>",
		r"<li\g<1>>\g<2></li>",
		re.IGNORECASE,
	),
	# 3. typography
	_rule("typographic_entities", TYPOGRAPHY, "[" + "".join(_ENTITIES) + "]", _typographic_entity),
	# 4. fixed corrections
	_rule("fix_teh", SPELLING, r"\bteh\b", _fix_teh, re.IGNORECASE),
	_rule("fix_rewards_s", SPELLING, r"\brewards\(s\)", "reward(s)", re.IGNORECASE),
	_rule("fix_regulations_s", SPELLING, r"\bregulations\(s\)", "regulation(s)", re.IGNORECASE),
	# 5. empty blocks
	_rule("drop_empty_paragraphs", PRUNING, rf"{_P_OPEN}\s*{_EMPTY_INLINE}</p>", "", re.IGNORECASE),
	_rule("drop_empty_items", PRUNING, rf"<li>\s*{_EMPTY_INLINE}</li>", "", re.IGNORECASE),
	# 6. list items
	_rule("join_items", LISTS, r"</li>\s*<li>", "</li><li>", re.IGNORECASE),
	_rule("bullet_paragraphs", LISTS, rf"{_P_OPEN}\s*(?:[●•·§▪]|o(?=\s))\s*(.*?)\s*</p>", r"<li>\g<1></li>", re.IGNORECASE),
	_rule("enumerated_paragraphs", LISTS, rf"{_P_OPEN}\s*(?:\d+|[a-zA-Z]|i+|I+)\.\s+(.*?)\s*</p>", r"<li>\g<1></li>"),
	_rule("indented_paragraphs", LISTS, rf"{_P_OPEN}(?:&nbsp;){{3,}}\s*(.*?)\s*</p>", r"<li>\g<1></li>", re.IGNORECASE),
	_rule("terminate_items", LISTS, r"<li>\s*([^<]+?)\s*</li>", _terminate_item, re.IGNORECASE),
)

_TRAILING_RULES: Tuple[Rule, ...] = (
	# 8. attributes and inline markup
	_rule("strip_classes", MARKUP, r"\sclass=([\"']).*?\1", "", re.IGNORECASE),
	_rule("collapse_breaks", MARKUP, r"(?:<br\s*/?>\s*){2,}", "<br/>", re.IGNORECASE),
	_rule("trim_breaks", MARKUP, r"^(?:<br\s*/?>\s*)+|(?:\s*<br\s*/?>)+$", "", re.IGNORECASE),
	_rule("drop_breaks", MARKUP, r"<br\s*/?>", "", re.IGNORECASE),
	_rule("unwrap_italics", MARKUP, r"</?(?:em|i)(?:\s[^>]*)?>", "", re.IGNORECASE),
	# 9. punctuation spacing
	_rule("period_outside_quote", PUNCTUATION, r"\.(&rdquo;|&rsquo;)</p>", r"\g<1>.</p>", re.IGNORECASE),
	_rule("collapse_spaced_periods", PUNCTUATION, r"\s+\.+", ". "),
	_rule("space_after_period", PUNCTUATION, r"([a-zA-Z0-9])\.([A-Z])(?![^<>]*>)", r"\g<1>. \g<2>"),
	_rule("drop_empty_parens", PUNCTUATION, r"\(\s*\)", ""),
	# 10. colon continuation
	_rule("open_colon_quote", INDENTATION, r":</p>\s*<p>", ":<br/><blockquote>", re.IGNORECASE),
	_rule(
		"close_colon_quote",
		INDENTATION,
		r"(<br/><blockquote>(?:(?!<br/><blockquote>).)*?)</p>\s*<p>\s*([A-Z][^<]*?\.)(?=\s*</p>)",
		r"\g<1></p></blockquote><p>\g<2>",
	),
	# 11. adjacent lists
	_rule("merge_adjacent_lists", COALESCING, r"</(ul|ol)>\s*<\1>", "", re.IGNORECASE),
)


def header_rule(header_pattern: Pattern[str]) -> Rule:
	return Rule(
		name="emphasize_headers",
		category=HEADERS,
		pattern=header_pattern,
		replacement=r"\g<1><strong>\g<2></strong>\g<3>",
	)


def build_rule_table(extra_headers: Optional[List[str]] = None) -> Tuple[Rule, ...]:
	"""Full ordered table, with the header rule built for `extra_headers`."""
	return _LEADING_RULES + (header_rule(build_header_pattern(extra_headers)),) + _TRAILING_RULES


def get_rule(name: str, extra_headers: Optional[List[str]] = None) -> Rule:
	for rule in build_rule_table(extra_headers):
		if rule.name == name:
			return rule
	raise KeyError(name)
