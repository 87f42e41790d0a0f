"""Tests for CLI commands."""

import json

import httpx
import pytest
from typer.testing import CliRunner

from themestats.cli.main import app
from themestats.cli.utils.config import ConfigManager
from themestats.client import ThemeStatsClient, generate_keypair, key_id_for

runner = CliRunner()


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    config_dir = tmp_path / "themestats"
    monkeypatch.setattr(ConfigManager, "DEFAULT_DIR", config_dir)
    return config_dir


@pytest.fixture
def initialized(config_dir):
    private_key, _ = generate_keypair()
    ConfigManager().save("https://themes.test", private_key)
    return private_key


@pytest.fixture
def service(monkeypatch):
    """Route CLI requests to a handler table instead of the network."""
    routes = {}
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return routes[(request.method, request.url.path)](request)

    def make_client(base_url, private_key, certificate=None):
        return ThemeStatsClient(base_url, private_key, certificate=certificate,
                                transport=httpx.MockTransport(handler))

    monkeypatch.setattr("themestats.cli.commands._runner.ThemeStatsClient", make_client)
    return routes, requests


class TestInitCommand:
    """Tests for themestats init."""

    def test_init_creates_config(self, config_dir):
        result = runner.invoke(app, ["init", "--api-url", "https://themes.example.com"])

        assert result.exit_code == 0
        assert "initialized successfully" in result.stdout
        assert (config_dir / "config.yaml").exists()
        assert (config_dir / "identity.pem").stat().st_mode & 0o777 == 0o600

    def test_init_json_output(self, config_dir):
        result = runner.invoke(app, ["init", "--api-url", "http://localhost:8787", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["status"] == "initialized"
        assert data["api_url"] == "http://localhost:8787"
        loaded = ConfigManager().load()
        assert data["key_id"] == key_id_for(loaded.private_key.public_key())

    def test_init_fails_without_force(self, config_dir):
        runner.invoke(app, ["init", "--api-url", "https://themes.example.com"])
        result = runner.invoke(app, ["init", "--api-url", "https://themes.example.com"])

        assert result.exit_code == 1
        assert "already exists" in result.stdout

    def test_init_force_replaces_identity(self, config_dir):
        runner.invoke(app, ["init", "--api-url", "https://themes.example.com"])
        before = key_id_for(ConfigManager().load().private_key.public_key())
        result = runner.invoke(app, ["init", "--api-url", "https://themes.example.com", "--force"])

        assert result.exit_code == 0
        assert key_id_for(ConfigManager().load().private_key.public_key()) != before

    def test_init_rejects_plain_http(self, config_dir):
        result = runner.invoke(app, ["init", "--api-url", "http://themes.example.com"])

        assert result.exit_code == 2
        assert not (config_dir / "config.yaml").exists()


class TestWhoamiCommand:
    def test_requires_config(self, config_dir):
        result = runner.invoke(app, ["whoami"])
        assert result.exit_code == 1
        assert "themestats init" in result.stdout

    def test_json(self, initialized):
        result = runner.invoke(app, ["whoami", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["key_id"] == key_id_for(initialized.public_key())
        assert data["certified"] is False


class TestInstallCommand:
    def test_install(self, initialized, service):
        routes, requests = service
        routes[("POST", "/api/install/dark-mode")] = lambda r: httpx.Response(200, json={"count": 4})

        result = runner.invoke(app, ["install", "dark-mode"])

        assert result.exit_code == 0
        assert "installs: 4" in result.stdout
        assert json.loads(requests[0].content)["payload"]["themeId"] == "dark-mode"

    def test_already_counted(self, initialized, service):
        routes, _ = service
        routes[("POST", "/api/install/dark-mode")] = lambda r: httpx.Response(
            200, json={"count": 4, "alreadyCounted": True})

        result = runner.invoke(app, ["install", "dark-mode", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"count": 4, "alreadyCounted": True}

    def test_invalid_theme_id(self, initialized):
        result = runner.invoke(app, ["install", "dark_mode"])
        assert result.exit_code == 2


class TestRateCommand:
    def test_first_rating_saves_certificate(self, initialized, service):
        routes, requests = service
        routes[("POST", "/api/rate/dark-mode")] = lambda r: httpx.Response(
            200, json={"average": 5, "count": 1, "certificate": "cert-abc"})

        result = runner.invoke(app, ["rate", "dark-mode", "5", "--turnstile-token", "tok"])

        assert result.exit_code == 0
        assert json.loads(requests[0].content)["turnstileToken"] == "tok"
        assert ConfigManager().load().certificate == "cert-abc"

    def test_saved_certificate_used(self, initialized, service):
        ConfigManager().save_certificate("cert-abc")
        routes, requests = service
        routes[("POST", "/api/rate/dark-mode")] = lambda r: httpx.Response(200, json={"average": 3, "count": 2})

        result = runner.invoke(app, ["rate", "dark-mode", "3"])

        assert result.exit_code == 0
        assert json.loads(requests[0].content)["certificate"] == "cert-abc"

    def test_token_renews_rejected_certificate(self, initialized, service):
        ConfigManager().save_certificate("stale.cert")
        routes, requests = service
        routes[("POST", "/api/rate/dark-mode")] = lambda r: httpx.Response(
            200, json={"average": 4, "count": 1, "certificate": "cert-new"})

        result = runner.invoke(app, ["rate", "dark-mode", "4", "-t", "tok"])

        assert result.exit_code == 0
        assert "certificate" not in json.loads(requests[0].content)
        assert ConfigManager().load().certificate == "cert-new"

    def test_without_certificate_or_token(self, initialized, service):
        result = runner.invoke(app, ["rate", "dark-mode", "3"])
        assert result.exit_code == 3
        assert service[1] == []

    def test_rating_out_of_range(self, initialized):
        result = runner.invoke(app, ["rate", "dark-mode", "7", "-t", "tok"])
        assert result.exit_code == 2

    def test_api_error(self, initialized, service):
        routes, _ = service
        routes[("POST", "/api/rate/dark-mode")] = lambda r: httpx.Response(
            401, json={"error": "INVALID_TURNSTILE", "message": "Turnstile verification failed"})

        result = runner.invoke(app, ["rate", "dark-mode", "4", "-t", "bad"])

        assert result.exit_code == 3
        assert "INVALID_TURNSTILE" in result.stdout

    def test_rate_limited(self, initialized, service):
        routes, _ = service
        routes[("POST", "/api/rate/dark-mode")] = lambda r: httpx.Response(
            429, json={"error": "RATE_LIMITED", "message": "Too many new ratings"}, headers={"Retry-After": "60"})

        result = runner.invoke(app, ["rate", "dark-mode", "4", "-t", "tok"])

        assert result.exit_code == 4
        assert "Retry in 60 seconds" in result.stdout


class TestReadCommands:
    def test_stats_json_filtered(self, initialized, service):
        routes, _ = service
        routes[("GET", "/api/stats")] = lambda r: httpx.Response(200, json={
            "dark-mode": {"installs": 3, "rating": 4.5, "ratingCount": 2},
            "light-mode": {"installs": 1, "rating": 0, "ratingCount": 0},
        })

        result = runner.invoke(app, ["stats", "--theme", "dark-mode", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"dark-mode": {"installs": 3, "rating": 4.5, "ratingCount": 2}}

    def test_stats_table(self, initialized, service):
        routes, _ = service
        routes[("GET", "/api/stats")] = lambda r: httpx.Response(200, json={
            "dark-mode": {"installs": 3, "rating": 4.5, "ratingCount": 2},
        })

        result = runner.invoke(app, ["stats"])

        assert result.exit_code == 0
        assert "dark-mode" in result.stdout

    def test_ratings(self, initialized, service):
        routes, requests = service
        routes[("POST", "/api/user/ratings")] = lambda r: httpx.Response(200, json={"dark-mode": 4})

        result = runner.invoke(app, ["ratings", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"dark-mode": 4}
        assert "publicKey" not in json.loads(requests[0].content)

    def test_no_ratings(self, initialized, service):
        routes, _ = service
        routes[("POST", "/api/user/ratings")] = lambda r: httpx.Response(200, json={})

        result = runner.invoke(app, ["ratings"])

        assert result.exit_code == 0
        assert "No ratings yet" in result.stdout
