"""Rate-limited, retrying async HTTP client shared by the REST adapters."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import RetryTransport

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes, URLTypes

    from runboard.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

_SECRET_PARAMS = ("key",)


class RequestOptions(TypedDict, total=False):
    params: QueryParamTypes | None
    json: object
    headers: HeaderTypes | None
    timeout: TimeoutTypes | UseClientDefault


class AsyncClientOptions(TypedDict, total=False):
    timeout: TimeoutTypes
    headers: HeaderTypes
    event_hooks: dict[str, list[Callable[[httpx.Response], Awaitable[None]]]]
    transport: httpx.AsyncBaseTransport


def redact_url(url: httpx.URL) -> str:
    """Render ``url`` for logs with credential query parameters masked."""

    for name in _SECRET_PARAMS:
        if name in url.params:
            url = url.copy_set_param(name, "REDACTED")
    return str(url)


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    log.debug("%s %s -> %s", request.method, redact_url(request.url), response.status_code)


class ResilientClient:
    """``httpx.AsyncClient`` with retries on transient failures and client-side throttling."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit is not None
            else None
        )
        self._client = httpx.AsyncClient(**self._client_options(config))

    @staticmethod
    def _client_options(config: ResilienceConfig) -> AsyncClientOptions:
        options: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(retry=config.retry.build()),
            "event_hooks": {"response": [_log_response]},
        }
        if config.default_headers:
            options["headers"] = dict(config.default_headers)
        return options

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, **kwargs)
        async with self._limiter:
            return await self._client.request(method, url, **kwargs)

    async def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def patch(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)
