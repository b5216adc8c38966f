from __future__ import annotations

import httpx
from httpx_retries import Retry

from runboard.adapters.http_resilience import ResilientClient, redact_url
from runboard.config import RateLimit, ResilienceConfig, RetryPolicy


def test_retry_policy_builds_transport_retry() -> None:
    retry = RetryPolicy(total=2, status_forcelist=frozenset({503})).build()

    assert isinstance(retry, Retry)
    assert retry.total == 2


async def test_client_applies_headers_and_rate_limit() -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="test",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"Authorization": "Bearer token"},
    )
    async with ResilientClient(config) as client:
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            transport=httpx.MockTransport(handler),
            headers=config.default_headers,
        )
        response = await client.patch("https://example.test/doc", json={"a": 1})

    assert response.json() == {"ok": True}
    assert seen[0].method == "PATCH"
    assert seen[0].headers["Authorization"] == "Bearer token"


def test_redact_url_masks_api_key() -> None:
    url = httpx.URL("https://firestore.test/v1/runs", params={"key": "secret", "pageSize": "300"})

    rendered = redact_url(url)

    assert "secret" not in rendered
    assert "key=REDACTED" in rendered
    assert "pageSize=300" in rendered


def test_redact_url_leaves_plain_urls_alone() -> None:
    assert redact_url(httpx.URL("http://localhost:8080/v1/runs")) == "http://localhost:8080/v1/runs"
