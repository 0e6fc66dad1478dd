"""
Tests for the HTTP endpoints.
"""

from fastapi.testclient import TestClient

from adapters import SoupFormatter


class TestCleanHtml:
    """Tests for POST /api/clean-html."""

    def test_success(self, client: TestClient):
        """Returns both the cleaned and the formatted document."""
        response = client.post("/api/clean-html", json={"html": "<p>ELIGIBILITY</p>"})
        assert response.status_code == 200
        data = response.json()
        assert data["cleaned"] == "<p><strong>ELIGIBILITY</strong></p>"
        assert "ELIGIBILITY" in data["formatted"]
        assert data["formatted"].startswith("<p>")

    def test_extra_headers(self, client: TestClient):
        """Request headers are emphasized."""
        response = client.post("/api/clean-html", json={"html": "<p>BONUS TERMS</p>", "headers": ["Bonus Terms"]})
        assert response.status_code == 200
        assert response.json()["cleaned"] == "<p><strong>BONUS TERMS</strong></p>"

    def test_missing_html(self, client: TestClient):
        """A request without html is an input error."""
        response = client.post("/api/clean-html", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "No HTML provided"}

    def test_empty_html(self, client: TestClient):
        """Empty html is an input error."""
        response = client.post("/api/clean-html", json={"html": ""})
        assert response.status_code == 400
        assert response.json()["error"] == "No HTML provided"

    def test_non_string_html(self, client: TestClient):
        """A malformed body is reported as an input error."""
        response = client.post("/api/clean-html", json={"html": 5})
        assert response.status_code == 400
        assert set(response.json()) == {"error"}
        assert "html" in response.json()["error"]

    def test_null_header(self, client: TestClient):
        """A null header phrase is an input error and is recorded."""
        response = client.post("/api/clean-html", json={"html": "<p>x</p>", "headers": [None]})
        assert response.status_code == 400
        assert "headers" in response.json()["error"]
        events = client.get("/events").json()["events"]
        assert events[0]["status"] == "error"
        assert events[0]["stage"] == "input"

    def test_format_failure(self, client: TestClient, monkeypatch):
        """A formatter failure is reported with the cleaned document."""

        def boom(self, html):
            raise RuntimeError("formatter exploded")

        monkeypatch.setattr(SoupFormatter, "format", boom)
        response = client.post("/api/clean-html", json={"html": "<p>ELIGIBILITY</p>"})
        assert response.status_code == 500
        data = response.json()
        assert data["stage"] == "format"
        assert "formatter exploded" in data["error"]
        assert data["cleaned"] == "<p><strong>ELIGIBILITY</strong></p>"

    def test_events_recorded(self, client: TestClient):
        """Each call leaves an event."""
        client.post("/api/clean-html", json={"html": "<p>x</p>"})
        client.post("/api/clean-html", json={"html": ""})
        events = client.get("/events").json()["events"]
        assert [e["status"] for e in events] == ["error", "success"]
        assert events[0]["stage"] == "input"

    def test_metrics(self, client: TestClient):
        """Metrics summarize recorded calls."""
        client.post("/api/clean-html", json={"html": "<p>x</p>"})
        data = client.get("/metrics", params={"hours": 1}).json()
        assert data["event_count"] == 1
        assert data["counters"]["event:clean_html"] == 1


class TestReadOnlyEndpoints:
    """Tests for headers, rules and config."""

    def test_headers_for_brand(self, client: TestClient):
        """Headers are rendered in the brand's style."""
        data = client.get("/headers", params={"brand": "ms"}).json()
        assert data["brand"] == "MS"
        assert data["style"] == "caps_underline"
        assert len(data["headers"]) == 14
        assert data["rendered"][0] == '<h4 class="underline font-bold text-lg tracking-wide mb-2">DESCRIPTION OF PROMOTION</h4>'

    def test_headers_default_brand(self, client: TestClient, monkeypatch):
        """Without a brand the configured default is used."""
        monkeypatch.setenv("CLEANER_DEFAULT_BRAND", "bs")
        assert client.get("/headers").json()["brand"] == "BS"

    def test_brands(self, client: TestClient):
        """All known brands are listed."""
        data = client.get("/brands").json()
        assert "WOF" in data["brands"]
        assert data["default"] == "MC"

    def test_rules(self, client: TestClient):
        """The rule table is listed in order."""
        rules = client.get("/rules").json()["rules"]
        assert rules[0]["name"] == "normalize_spaces"
        assert rules[-1]["name"] == "merge_adjacent_lists"
        assert [r["index"] for r in rules] == list(range(len(rules)))

    def test_config(self, client: TestClient):
        """Interactive clients get the debounce window."""
        assert client.get("/config").json() == {"debounce_ms": 300, "default_brand": "MC"}
