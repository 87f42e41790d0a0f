"""Tests for ThemeStatsClient against a mocked service."""
import json

import httpx
import pytest

from themestats.client import ThemeStatsClient, generate_keypair, key_id_for
from themestats.client.exceptions import ApiError, RateLimitError, ThemeStatsClientError, TransportError
from themestats.protocol.signing import verify_signature


class Recorder:
    """Mock transport handler answering from a route table."""

    def __init__(self, routes: dict) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes[(request.method, request.url.path)](request)

    def body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


def _client(recorder: Recorder, private_key=None, certificate=None, max_retries: int = 3) -> ThemeStatsClient:
    private_key = private_key or generate_keypair()[0]
    return ThemeStatsClient(
        "https://themes.test", private_key, certificate=certificate, max_retries=max_retries,
        transport=httpx.MockTransport(recorder),
    )


class TestRate:
    async def test_first_rating_stores_certificate(self) -> None:
        recorder = Recorder({
            ("POST", "/api/rate/dark-mode"): lambda r: httpx.Response(
                200, json={"average": 5, "count": 1, "certificate": "cert-1"}),
        })
        async with _client(recorder) as client:
            result = await client.rate("dark-mode", 5, turnstile_token="tok")
            assert client.certificate == "cert-1"
        body = recorder.body()
        assert result["count"] == 1
        assert body["turnstileToken"] == "tok"
        assert body["payload"]["rating"] == 5
        assert verify_signature(body["payload"], body["signature"], body["publicKey"])

    async def test_certificate_sent_on_later_ratings(self) -> None:
        recorder = Recorder({
            ("POST", "/api/rate/dark-mode"): lambda r: httpx.Response(200, json={"average": 4, "count": 1}),
        })
        async with _client(recorder, certificate="cert-1") as client:
            await client.rate("dark-mode", 4)
        body = recorder.body()
        assert body["certificate"] == "cert-1"
        assert "turnstileToken" not in body

    async def test_explicit_token_replaces_stored_certificate(self) -> None:
        recorder = Recorder({
            ("POST", "/api/rate/dark-mode"): lambda r: httpx.Response(
                200, json={"average": 4, "count": 1, "certificate": "cert-2"}),
        })
        async with _client(recorder, certificate="stale.cert") as client:
            await client.rate("dark-mode", 4, turnstile_token="fresh-token")
            assert client.certificate == "cert-2"
        body = recorder.body()
        assert body["turnstileToken"] == "fresh-token"
        assert "certificate" not in body

    async def test_requires_certificate_or_token(self) -> None:
        async with _client(Recorder({})) as client:
            with pytest.raises(ThemeStatsClientError):
                await client.rate("dark-mode", 4)

    async def test_error_body_raised(self) -> None:
        recorder = Recorder({
            ("POST", "/api/rate/dark-mode"): lambda r: httpx.Response(
                401, json={"error": "INVALID_TURNSTILE", "message": "Turnstile verification failed"}),
        })
        async with _client(recorder) as client:
            with pytest.raises(ApiError) as exc_info:
                await client.rate("dark-mode", 4, turnstile_token="tok")
        assert exc_info.value.code == "INVALID_TURNSTILE"
        assert exc_info.value.status_code == 401

    async def test_rate_limited(self) -> None:
        recorder = Recorder({
            ("POST", "/api/rate/dark-mode"): lambda r: httpx.Response(
                429, json={"error": "RATE_LIMITED", "message": "slow down"}, headers={"Retry-After": "120"}),
        })
        async with _client(recorder) as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.rate("dark-mode", 4, turnstile_token="tok")
        assert exc_info.value.retry_after == 120

    async def test_mutations_not_retried(self) -> None:
        recorder = Recorder({("POST", "/api/rate/dark-mode"): lambda r: httpx.Response(503)})
        async with _client(recorder) as client:
            with pytest.raises(ApiError):
                await client.rate("dark-mode", 4, turnstile_token="tok")
        assert len(recorder.requests) == 1


class TestInstallAndReads:
    async def test_install(self) -> None:
        private_key, public_key = generate_keypair()
        recorder = Recorder({
            ("POST", "/api/install/dark-mode"): lambda r: httpx.Response(200, json={"count": 3}),
        })
        async with _client(recorder, private_key) as client:
            assert await client.install("dark-mode") == {"count": 3}
        assert recorder.body()["payload"]["keyId"] == key_id_for(public_key)

    async def test_my_ratings_omits_public_key(self) -> None:
        recorder = Recorder({
            ("POST", "/api/user/ratings"): lambda r: httpx.Response(200, json={"dark-mode": 4}),
        })
        async with _client(recorder) as client:
            assert await client.my_ratings() == {"dark-mode": 4}
        assert "publicKey" not in recorder.body()

    async def test_identity_defaults_to_own_key(self) -> None:
        private_key, public_key = generate_keypair()
        key_id = key_id_for(public_key)
        recorder = Recorder({
            ("GET", f"/api/identity/{key_id}"): lambda r: httpx.Response(200, json={"keyId": key_id}),
        })
        async with _client(recorder, private_key) as client:
            assert (await client.identity())["keyId"] == key_id

    async def test_reads_retry_server_errors(self, monkeypatch) -> None:
        responses = iter([httpx.Response(503), httpx.Response(200, json={})])
        recorder = Recorder({("GET", "/api/stats"): lambda r: next(responses)})
        monkeypatch.setattr("themestats.client.transport.Transport._backoff", lambda self, attempt: 0)
        async with _client(recorder) as client:
            assert await client.stats() == {}
        assert len(recorder.requests) == 2

    async def test_network_failure(self, monkeypatch) -> None:
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        monkeypatch.setattr("themestats.client.transport.Transport._backoff", lambda self, attempt: 0)
        async with _client(Recorder({("GET", "/api/rating/dark-mode"): fail}), max_retries=2) as client:
            with pytest.raises(TransportError):
                await client.rating("dark-mode")
