"""HTTP client for the Firestore REST API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

from runboard.adapters.http_resilience import ResilientClient
from runboard.config import RateLimit, ResilienceConfig

from .codec import encode_fields
from .schema import ErrorResponse, FirestoreDocument, ListDocumentsResponse, RunQueryItem

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Mapping, Sequence
    from types import TracebackType

    import httpx

    from runboard.config import FirestoreConfig

log = getLogger(__name__)

DEFAULT_PAGE_SIZE: Final[int] = 300
_DEFAULT_TIMEOUT_SECONDS = 20.0
_EMULATOR_TOKEN = "owner"  # noqa: S105


class FirestoreAPIError(RuntimeError):
    """Raised when Firestore answers with an error status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        status: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status = status


def _default_resilience_config(config: FirestoreConfig) -> ResilienceConfig:
    headers: dict[str, str] = {}
    if config.emulator_host:
        headers["Authorization"] = f"Bearer {_EMULATOR_TOKEN}"
    elif config.access_token:
        headers["Authorization"] = f"Bearer {config.access_token}"
    return ResilienceConfig(
        name="firestore",
        timeout_seconds=_DEFAULT_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=50, per_seconds=1.0),
        default_headers=headers or None,
    )


def _default_client_factory(resilience: ResilienceConfig) -> ResilientClient:
    return ResilientClient(resilience)


class FirestoreClient:
    """Minimal document API: list, get, query and partial update."""

    def __init__(
        self,
        config: FirestoreConfig,
        *,
        resilience: ResilienceConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
    ) -> None:
        self.config = config
        self.resilience = resilience or _default_resilience_config(config)
        self._http = client_factory(self.resilience)

    async def __aenter__(self) -> FirestoreClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_documents(
        self,
        collection: str,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> AsyncIterator[FirestoreDocument]:
        page_token: str | None = None
        while True:
            params: list[tuple[str, str | int]] = [("pageSize", page_size)]
            if page_token:
                params.append(("pageToken", page_token))
            response = await self._http.get(
                self._collection_url(collection),
                params=self._with_auth(params),
            )
            self._raise_for_error(response)
            page = ListDocumentsResponse.model_validate(response.json())
            for document in page.documents:
                yield document
            if not page.next_page_token:
                return
            page_token = page.next_page_token

    async def get_document(self, collection: str, document_id: str) -> FirestoreDocument | None:
        response = await self._http.get(
            self._document_url(collection, document_id),
            params=self._with_auth([]),
        )
        if response.status_code == 404:
            return None
        self._raise_for_error(response)
        return FirestoreDocument.model_validate(response.json())

    async def run_query(self, structured_query: Mapping[str, object]) -> list[FirestoreDocument]:
        response = await self._http.post(
            f"{self.config.documents_url}:runQuery",
            params=self._with_auth([]),
            json={"structuredQuery": structured_query},
        )
        self._raise_for_error(response)
        items = [RunQueryItem.model_validate(item) for item in response.json()]
        return [item.document for item in items if item.document is not None]

    async def patch_document(
        self,
        collection: str,
        document_id: str,
        data: Mapping[str, object],
    ) -> FirestoreDocument | None:
        """Update only the fields in ``data`` of an existing document.

        Returns ``None`` when the document does not exist; nothing is created.
        """

        params: list[tuple[str, str | int]] = [
            ("updateMask.fieldPaths", field_path) for field_path in data
        ]
        params.append(("currentDocument.exists", "true"))
        response = await self._http.patch(
            self._document_url(collection, document_id),
            params=self._with_auth(params),
            json={"fields": encode_fields(data)},
        )
        if response.status_code == 404:
            log.warning("Firestore document %s/%s not found", collection, document_id)
            return None
        self._raise_for_error(response)
        return FirestoreDocument.model_validate(response.json())

    def _collection_url(self, collection: str) -> str:
        return f"{self.config.documents_url}/{quote(collection, safe='')}"

    def _document_url(self, collection: str, document_id: str) -> str:
        return f"{self._collection_url(collection)}/{quote(document_id, safe='')}"

    def _with_auth(
        self,
        params: Sequence[tuple[str, str | int]],
    ) -> list[tuple[str, str | int]]:
        if self.config.emulator_host or not self.config.api_key:
            return list(params)
        return [*params, ("key", self.config.api_key)]

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            detail = ErrorResponse.model_validate(response.json()).error
        except ValueError:
            message = response.text or response.reason_phrase
            status = None
        else:
            message = detail.message or response.reason_phrase
            status = detail.status
        log.error(f"Firestore API error {response.status_code} ({status}): {message}")
        raise FirestoreAPIError(message, status_code=response.status_code, status=status)
