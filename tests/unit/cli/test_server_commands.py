"""Unit tests for the server command group and the root status shortcut."""

import json

import pytest

OVERVIEW = {
    "totalTools": 5,
    "activeTools": 4,
    "totalCalls": 8,
    "totalSuccess": 6,
    "totalFailed": 2,
    "cacheHitRate": 50.0,
    "schedulesCount": 1,
    "webhooksCount": 2,
    "pipelinesCount": 0,
    "aliasesCount": 3,
}


class TestStatus:
    """Tests for the status commands."""

    @pytest.mark.parametrize("args", [("status",), ("server", "status")])
    def test_running(self, invoke, fake_server, args) -> None:
        """Test status reports a running server."""
        fake_server.add("GET", "overview", json=OVERVIEW)

        result = invoke(*args)

        assert result.exit_code == 0
        assert "✓ Server is running at http://architect.test" in result.output

    @pytest.mark.parametrize("args", [("status",), ("server", "status")])
    def test_not_running(self, invoke, fake_server, args) -> None:
        """Test status reports a stopped server."""
        fake_server.refuse_all()

        result = invoke(*args)

        assert result.exit_code == 1
        assert "✗ Server is not running at http://architect.test" in result.output
        assert "ARCHITECT_SERVER" in result.output

    def test_other_errors_are_reported_as_is(self, invoke, fake_server) -> None:
        """Test status reports other errors unchanged."""
        fake_server.add("GET", "overview", status=500, json={"error": "database locked"})

        result = invoke("status")

        assert result.exit_code == 1
        assert "Server error (500): database locked" in result.output
        assert "not running" not in result.output

    def test_server_flag_redirects_requests(self, invoke, fake_server) -> None:
        """Test --server changes the request URL."""
        fake_server.add("GET", "overview", json=OVERVIEW)

        result = invoke("--server", "http://other.test:4000/", "status")

        assert result.exit_code == 0
        assert "Server is running at http://other.test:4000" in result.output
        assert str(fake_server.last_request.url) == "http://other.test:4000/api/overview"


class TestOverview:
    """Tests for the server overview command."""

    def test_table(self, invoke, fake_server) -> None:
        """Test overview metric table."""
        fake_server.add("GET", "overview", json=OVERVIEW)

        result = invoke("server", "overview")

        assert result.exit_code == 0
        assert "Architect Server Overview" in result.output
        assert "Server: http://architect.test" in result.output
        assert "75.0%" in result.output
        assert "50%" in result.output

    def test_no_calls(self, invoke, fake_server) -> None:
        """Test overview success rate without calls."""
        fake_server.add("GET", "overview", json={**OVERVIEW, "totalCalls": 0, "totalSuccess": 0, "totalFailed": 0})

        result = invoke("server", "overview")

        assert result.exit_code == 0
        assert "0.0%" in result.output

    def test_json(self, invoke, fake_server) -> None:
        """Test overview --json."""
        fake_server.add("GET", "overview", json=OVERVIEW)

        result = invoke("server", "overview", "--json")

        assert result.exit_code == 0
        assert json.loads(result.stdout) == OVERVIEW

    def test_json_keeps_number_types(self, invoke, fake_server) -> None:
        """Test overview --json keeps integer rates."""
        fake_server.add("GET", "overview", json={**OVERVIEW, "cacheHitRate": 50})

        result = invoke("server", "overview", "--json")

        assert '"cacheHitRate": 50,' in result.stdout
        assert "50.0" not in result.stdout

    def test_malformed_payload(self, invoke, fake_server) -> None:
        """Test a malformed overview is an invalid response."""
        fake_server.add("GET", "overview", json={"totalTools": "many"})

        result = invoke("server", "overview")

        assert result.exit_code == 1
        assert "Invalid response from server (overview)" in result.output


class TestLogs:
    """Tests for the server logs command."""

    ENTRIES = [
        {"timestamp": "2024-05-01T10:00:00", "action": "execute", "toolName": "weather", "duration": 42},
        {"timestamp": "2024-05-01T10:05:00", "action": "reload", "toolName": "calc"},
    ]

    def test_default_limit(self, invoke, fake_server) -> None:
        """Test logs requests 50 entries by default."""
        fake_server.add("GET", "audit", json=self.ENTRIES)

        result = invoke("server", "logs")

        assert result.exit_code == 0
        assert dict(fake_server.last_request.url.params) == {"limit": "50"}
        assert "Audit Logs (2)" in result.output
        assert "42ms" in result.output
        assert "2024-05-01 10:00:00" in result.output

    def test_limit_and_tool(self, invoke, fake_server) -> None:
        """Test logs forwards limit and tool."""
        fake_server.add("GET", "audit", json=self.ENTRIES[:1])

        result = invoke("server", "logs", "-n", "10", "-t", "weather")

        assert result.exit_code == 0
        assert dict(fake_server.last_request.url.params) == {"limit": "10", "tool": "weather"}

    def test_limit_must_be_positive(self, invoke) -> None:
        """Test logs rejects a zero limit."""
        result = invoke("server", "logs", "--limit", "0")

        assert result.exit_code != 0

    def test_empty(self, invoke, fake_server) -> None:
        """Test empty audit log prints the empty state."""
        fake_server.add("GET", "audit", json=[])

        result = invoke("server", "logs")

        assert result.exit_code == 0
        assert "(no audit logs yet)" in result.output

    def test_json(self, invoke, fake_server) -> None:
        """Test logs --json."""
        fake_server.add("GET", "audit", json=self.ENTRIES)

        result = invoke("server", "logs", "--json")

        assert json.loads(result.stdout) == self.ENTRIES

    def test_json_keeps_integer_duration(self, invoke, fake_server) -> None:
        """Test logs --json keeps integer durations."""
        fake_server.add("GET", "audit", json=self.ENTRIES)

        result = invoke("server", "logs", "--json")

        assert '"duration": 42\n' in result.stdout
        assert "42.0" not in result.stdout


class TestCache:
    """Tests for the server cache commands."""

    def test_stats(self, invoke, fake_server) -> None:
        """Test cache stats tables."""
        fake_server.add(
            "GET",
            "cache",
            json={"totalEntries": 3, "hits": 9, "misses": 1, "hitRate": 90.0, "entriesByTool": {"weather": 3}},
        )

        result = invoke("server", "cache", "stats")

        assert result.exit_code == 0
        assert "Cache Stats" in result.output
        assert "90%" in result.output
        assert "Entries by Tool" in result.output

    def test_stats_json_keeps_number_types(self, invoke, fake_server) -> None:
        """Test cache stats --json keeps integer rates."""
        fake_server.add(
            "GET",
            "cache",
            json={"totalEntries": 1, "hits": 1, "misses": 1, "hitRate": 50, "entriesByTool": {}},
        )

        result = invoke("server", "cache", "stats", "--json")

        assert '"hitRate": 50,' in result.stdout
        assert "50.0" not in result.stdout

    def test_stats_without_per_tool_entries(self, invoke, fake_server) -> None:
        """Test cache stats without per-tool entries."""
        fake_server.add("GET", "cache", json={"totalEntries": 0, "hits": 0, "misses": 0, "hitRate": 0})

        result = invoke("server", "cache", "stats")

        assert result.exit_code == 0
        assert "Entries by Tool" not in result.output

    def test_clear_all(self, invoke, fake_server) -> None:
        """Test clearing the whole cache."""
        fake_server.add("DELETE", "cache", json={"cleared": 5})

        result = invoke("server", "cache", "clear")

        assert result.exit_code == 0
        assert fake_server.last_request.method == "DELETE"
        assert not fake_server.last_request.url.params
        assert "✓ Cleared 5 cache entries" in result.output

    def test_clear_one_tool(self, invoke, fake_server) -> None:
        """Test clearing one tool's cache."""
        fake_server.add("DELETE", "cache", json={"cleared": 1})

        result = invoke("server", "cache", "clear", "weather")

        assert result.exit_code == 0
        assert dict(fake_server.last_request.url.params) == {"tool": "weather"}
        assert "✓ Cleared 1 cache entry" in result.output
        assert "entries" not in result.output


class TestListings:
    """Tests for the server listing commands."""

    def test_permissions(self, invoke, fake_server) -> None:
        """Test permissions table."""
        fake_server.add(
            "GET",
            "permissions",
            json=[{
                "toolName": "weather",
                "toolVersion": 3,
                "approvedCapabilities": [{"type": "network"}, {"type": "filesystem"}],
                "approvedAt": "2024-05-01T10:00:00",
            }],
        )

        result = invoke("server", "permissions")

        assert result.exit_code == 0
        assert "Permissions (1)" in result.output
        assert "network, filesystem" in result.output

    def test_schedules(self, invoke, fake_server) -> None:
        """Test schedules table."""
        fake_server.add(
            "GET",
            "schedules",
            json=[{"id": "sched_0123456789abcdef", "toolName": "weather", "cron": "@hourly", "enabled": False}],
        )

        result = invoke("server", "schedules")

        assert result.exit_code == 0
        assert "sched_0123456789..." in result.output
        assert "disabled" in result.output
        assert "never" in result.output

    def test_webhooks(self, invoke, fake_server) -> None:
        """Test webhooks table hides the secret."""
        fake_server.add(
            "GET",
            "webhooks",
            json=[{
                "id": "wh_1234567890abcdef",
                "toolName": "calc",
                "path": "/calc",
                "method": "POST",
                "enabled": True,
                "secret": "s3cr3t",
            }],
        )

        result = invoke("server", "webhooks")

        assert result.exit_code == 0
        assert "wh_123456789..." in result.output
        assert "/webhook/calc" in result.output
        assert "s3cr3t" not in result.output

    def test_webhooks_json_hides_secret(self, invoke, fake_server) -> None:
        """Test webhooks --json omits the secret."""
        fake_server.add(
            "GET",
            "webhooks",
            json=[{"id": "wh_1", "toolName": "calc", "path": "/calc", "method": "POST", "enabled": True, "secret": "x"}],
        )

        result = invoke("server", "webhooks", "--json")

        assert json.loads(result.stdout) == [
            {"id": "wh_1", "toolName": "calc", "path": "/calc", "method": "POST", "enabled": True},
        ]

    def test_pipelines(self, invoke, fake_server) -> None:
        """Test pipelines table."""
        fake_server.add(
            "GET",
            "pipelines",
            json=[{"name": "forecast", "description": "Fetch and format", "steps": [{"tool": "weather"}, {"tool": "fmt"}]}],
        )

        result = invoke("server", "pipelines")

        assert result.exit_code == 0
        assert "Pipelines (1)" in result.output
        assert "weather → fmt" in result.output

    @pytest.mark.parametrize(
        ("command", "message"),
        [
            ("permissions", "no permissions configured"),
            ("schedules", "no schedules configured"),
            ("webhooks", "no webhooks configured"),
            ("pipelines", "no pipelines defined"),
            ("secrets", "no secrets stored"),
        ],
    )
    def test_empty_listings(self, invoke, fake_server, command, message) -> None:
        """Test each listing prints its empty state."""
        fake_server.add("GET", command, json=[])

        result = invoke("server", command)

        assert result.exit_code == 0
        assert f"({message})" in result.output


class TestSecrets:
    """Tests for the server secrets command."""

    PAYLOAD = [
        {
            "name": "GITHUB_TOKEN",
            "value": "ghp_plaintext",
            "createdAt": "2024-05-01T10:00:00",
            "updatedAt": "2024-05-02T10:00:00",
        },
    ]

    def test_table_never_shows_values(self, invoke, fake_server) -> None:
        """Test secrets table never shows values."""
        fake_server.add("GET", "secrets", json=self.PAYLOAD)

        result = invoke("server", "secrets")

        assert result.exit_code == 0
        assert "GITHUB_TOKEN" in result.output
        assert "Secret values are never displayed" in result.output
        assert "ghp_plaintext" not in result.output

    def test_json_has_only_metadata(self, invoke, fake_server) -> None:
        """Test secrets --json has only metadata."""
        fake_server.add("GET", "secrets", json=self.PAYLOAD)

        result = invoke("server", "secrets", "--json")

        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {"name": "GITHUB_TOKEN", "createdAt": "2024-05-01T10:00:00", "updatedAt": "2024-05-02T10:00:00"},
        ]
