"""
Tests for the BeautifulSoup sanitizer and pretty-printer adapters.
"""

from adapters import ALLOWED_ATTRIBUTES, AdapterError, SoupFormatter, SoupSanitizer


class TestSoupSanitizer:
    """Tests for SoupSanitizer."""

    def test_allowed_attributes(self):
        """The allow-list matches the terms editor's needs."""
        assert set(ALLOWED_ATTRIBUTES) == {"class", "href", "src", "alt", "title", "align"}

    def test_script_removed_with_content(self):
        """Script elements disappear entirely."""
        assert SoupSanitizer().sanitize("<p>Hi<script>alert(1)</script></p>") == "<p>Hi</p>"

    def test_disallowed_attributes_stripped(self):
        """Only allow-listed attributes survive, in source order."""
        out = SoupSanitizer().sanitize('<p style="color:red" align="center" class="c" onclick="x()">x</p>')
        assert out == '<p align="center" class="c">x</p>'

    def test_unsafe_urls_dropped(self):
        """javascript: links lose their href."""
        out = SoupSanitizer().sanitize('<a href="javascript:alert(1)" title="t">x</a>')
        assert out == '<a title="t">x</a>'

    def test_safe_urls_kept(self):
        """Ordinary links are untouched."""
        out = SoupSanitizer().sanitize('<a href="https://example.com/terms">terms</a>')
        assert out == '<a href="https://example.com/terms">terms</a>'

    def test_comments_removed(self):
        """HTML comments are dropped."""
        assert SoupSanitizer().sanitize("<!-- note --><p>x</p>") == "<p>x</p>"

    def test_nested_dropped_elements(self):
        """Form controls inside a dropped form are handled once."""
        out = SoupSanitizer().sanitize('<div><form><input name="x"><p>in</p></form><p>out</p></div>')
        assert out == "<div><p>out</p></div>"

    def test_custom_allow_list(self):
        """Callers can narrow the allow-list."""
        out = SoupSanitizer().sanitize('<p class="c" title="t">x</p>', ["title"])
        assert out == '<p title="t">x</p>'


class TestSoupFormatter:
    """Tests for SoupFormatter."""

    def test_indents_and_keeps_entities(self):
        """Output is indented and typographic entities stay named."""
        out = SoupFormatter(indent=2).format("<p>Hi &ldquo;x&rdquo;</p>")
        assert out.startswith("<p>\n")
        assert "\n  Hi &ldquo;x&rdquo;\n" in out
        assert "</p>" in out

    def test_nested_indent(self):
        """Nested elements indent one level deeper."""
        out = SoupFormatter(indent=2).format("<ul><li>a.</li></ul>")
        assert "\n  <li>" in out
        assert "\n    a.\n" in out

    def test_indent_from_environment(self, monkeypatch):
        """The default indent comes from CLEANER_FORMAT_INDENT."""
        monkeypatch.setenv("CLEANER_FORMAT_INDENT", "4")
        assert SoupFormatter().indent == 4

    def test_bad_indent_setting_falls_back(self, monkeypatch):
        """Unparseable settings use the default of two."""
        monkeypatch.setenv("CLEANER_FORMAT_INDENT", "wide")
        assert SoupFormatter().indent == 2


class TestAdapterError:
    """Tests for AdapterError."""

    def test_carries_stage_and_cleaned(self):
        """The error names its stage and may carry the cleaned document."""
        exc = AdapterError("format", "boom", cleaned="<p>x</p>")
        assert exc.stage == "format"
        assert exc.cleaned == "<p>x</p>"
        assert str(exc) == "boom"
