"""Pytest fixtures shared by the themestats tests."""
from pathlib import Path
from typing import Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from themestats.client import generate_keypair
from themestats.server.app import create_app
from themestats.server.config import RateLimitConfig, ServerConfig, TurnstileConfig
from themestats.state.database import DatabaseManager

SIGNING_KEY = "test-certificate-signing-key-0123456789abcdef"
VALID_TOKEN = "valid-turnstile-token"


class StubVerifier:
    """Accepts exactly one token value and records every call."""

    def __init__(self, accepted: str = VALID_TOKEN) -> None:
        self.accepted = accepted
        self.calls: list[tuple[str, Optional[str]]] = []

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> bool:
        self.calls.append((token, remote_ip))
        return token == self.accepted


@pytest.fixture
def keypair():
    return generate_keypair()


@pytest.fixture
def private_key(keypair):
    return keypair[0]


@pytest.fixture
def verifier() -> StubVerifier:
    return StubVerifier()


@pytest.fixture
def server_config(tmp_path: Path) -> ServerConfig:
    return ServerConfig(
        certificate_signing_key=SIGNING_KEY,
        turnstile=TurnstileConfig(secret_key="turnstile-secret"),
        rate_limit=RateLimitConfig(),
        db_path=tmp_path / "test.db",
    )


@pytest.fixture
def client(server_config: ServerConfig, verifier: StubVerifier) -> TestClient:
    app = create_app(server_config, verifier=verifier)
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> DatabaseManager:
    manager = DatabaseManager(tmp_path / "state.db")
    await manager.initialize()
    yield manager
    await manager.close()
