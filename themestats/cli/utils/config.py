"""Configuration file management for CLI."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey

from themestats.client import SignatureError, private_key_from_pem, private_key_to_pem


@dataclass
class ClientConfig:
    """Client configuration loaded from config file."""

    api_url: str
    private_key: EllipticCurvePrivateKey
    certificate: Optional[str] = None


class ConfigError(Exception):
    """Configuration file error."""

    pass


class ConfigManager:
    """Manages client configuration in ~/.themestats/config.yaml."""

    DEFAULT_DIR = Path.home() / ".themestats"
    CONFIG_FILE = "config.yaml"
    KEY_FILE = "identity.pem"

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self._config_dir = config_dir or self.DEFAULT_DIR
        self._config_path = self._config_dir / self.CONFIG_FILE
        self._key_path = self._config_dir / self.KEY_FILE

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def config_path(self) -> Path:
        return self._config_path

    @property
    def key_path(self) -> Path:
        return self._key_path

    def exists(self) -> bool:
        """Check if configuration exists."""
        return self._config_path.exists() and self._key_path.exists()

    def load(self) -> ClientConfig:
        """Load configuration from file. Raises ConfigError if not found."""
        if not self._config_path.exists():
            raise ConfigError(
                f"Config not found at {self._config_path}. Run 'themestats init' first."
            )
        if not self._key_path.exists():
            raise ConfigError(
                f"Key file not found at {self._key_path}. Run 'themestats init' first."
            )

        with open(self._config_path) as f:
            data = yaml.safe_load(f)

        if not data or "api_url" not in data:
            raise ConfigError("Invalid config: missing api_url")

        with open(self._key_path, "rb") as f:
            key_bytes = f.read()

        try:
            private_key = private_key_from_pem(key_bytes)
        except SignatureError as e:
            raise ConfigError(f"Invalid key file: {e}") from e

        return ClientConfig(
            api_url=data["api_url"],
            private_key=private_key,
            certificate=data.get("certificate"),
        )

    def save(self, api_url: str, private_key: EllipticCurvePrivateKey) -> None:
        """Write a fresh config and key file. Any stored certificate is dropped."""
        self._config_dir.mkdir(parents=True, exist_ok=True)
        self._write_config({"api_url": api_url})

        with open(self._key_path, "wb") as f:
            f.write(private_key_to_pem(private_key))

        self._key_path.chmod(0o600)

    def save_certificate(self, certificate: str) -> None:
        """Remember the certificate issued for this identity."""
        with open(self._config_path) as f:
            data = yaml.safe_load(f) or {}
        data["certificate"] = certificate
        self._write_config(data)

    def _write_config(self, data: dict) -> None:
        with open(self._config_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False)
