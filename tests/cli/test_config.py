"""Tests for CLI configuration management."""

from pathlib import Path

import pytest

from themestats.cli.utils.config import ClientConfig, ConfigError, ConfigManager
from themestats.client import generate_keypair, key_id_for


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_default_config_dir(self):
        assert ConfigManager().config_dir == Path.home() / ".themestats"

    def test_exists_returns_false_when_missing(self, tmp_path):
        assert ConfigManager(tmp_path / "nonexistent").exists() is False

    def test_save_and_load(self, tmp_path):
        manager = ConfigManager(tmp_path / "themestats")
        private_key, public_key = generate_keypair()
        manager.save("https://themes.example.com", private_key)

        loaded = manager.load()
        assert isinstance(loaded, ClientConfig)
        assert loaded.api_url == "https://themes.example.com"
        assert loaded.certificate is None
        assert key_id_for(loaded.private_key.public_key()) == key_id_for(public_key)

    def test_certificate_persisted(self, tmp_path):
        manager = ConfigManager(tmp_path / "themestats")
        manager.save("https://themes.example.com", generate_keypair()[0])
        manager.save_certificate("cert-xyz")

        assert manager.load().certificate == "cert-xyz"
        assert manager.load().api_url == "https://themes.example.com"

    def test_save_drops_certificate(self, tmp_path):
        manager = ConfigManager(tmp_path / "themestats")
        manager.save("https://themes.example.com", generate_keypair()[0])
        manager.save_certificate("cert-xyz")
        manager.save("https://themes.example.com", generate_keypair()[0])

        assert manager.load().certificate is None

    def test_load_missing_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="themestats init"):
            ConfigManager(tmp_path).load()

    def test_load_bad_key_raises(self, tmp_path):
        manager = ConfigManager(tmp_path)
        manager.save("https://themes.example.com", generate_keypair()[0])
        manager.key_path.write_bytes(b"garbage")

        with pytest.raises(ConfigError, match="Invalid key file"):
            manager.load()
