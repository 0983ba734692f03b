"""Client for the optional remote relevance-scoring and recommendation endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .config import RemoteSearchConfig

logger = logging.getLogger(__name__)


class RemoteSearchError(RuntimeError):
    """Raised when the remote search endpoint returns an error response."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class RemoteMatch(BaseModel):
    """One scored item in a remote response."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    item_id: str = Field(alias="itemId")
    relevance_score: float = Field(alias="relevanceScore")
    matched_fields: list[str] = Field(default_factory=list, alias="matchedFields")
    reasoning: str = ""


class RemoteSearchResponse(BaseModel):
    results: list[RemoteMatch] = Field(default_factory=list)


class RemoteRecommendationResponse(BaseModel):
    """Item ids picked by the remote recommender, best first."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    item_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("itemIds", "quizIds", "item_ids"),
    )


class RemoteSearchClient:
    """Async HTTP client for the remote relevance and recommendation endpoints."""

    def __init__(
        self,
        url: str | None = None,
        timeout_s: float | None = None,
        api_key: str | None = None,
        recommend_url: str | None = None,
    ) -> None:
        config = RemoteSearchConfig()
        self._url = url or config.url
        self._recommend_url = recommend_url or config.recommend_url
        if not self._url and not self._recommend_url:
            raise ValueError("Remote search or recommendation URL is required")
        self._timeout_s = timeout_s or config.timeout_s
        self._api_key = api_key or config.api_key
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "RemoteSearchClient":
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        self._client = httpx.AsyncClient(timeout=self._timeout_s, headers=headers)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client:
            await self._client.aclose()

    @property
    def url(self) -> str | None:
        """Return the configured search endpoint (for logging/debugging)."""
        return self._url

    @property
    def recommend_url(self) -> str | None:
        return self._recommend_url

    @property
    def timeout_s(self) -> float:
        return self._timeout_s

    async def search(self, query: str, catalog_summary: list[dict[str, Any]]) -> RemoteSearchResponse:
        """Ask the remote endpoint to score a catalog summary against a query.

        Raises:
            RemoteSearchError: On a non-2xx response or when no search URL is set
            pydantic.ValidationError: If the body does not match the schema
        """
        url = self._require(self._url, "search")
        logger.info(
            "[RemoteSearch] Scoring query=%r items=%d url=%s",
            query,
            len(catalog_summary),
            url,
        )
        response = await self._client.post(
            url,
            json={"query": query, "catalogSummary": catalog_summary},
        )
        return RemoteSearchResponse.model_validate(self._handle_response(response))

    async def recommend(
        self,
        preferences: dict[str, Any],
        available_items: list[dict[str, Any]],
    ) -> RemoteRecommendationResponse:
        """Ask the remote endpoint to pick items for a user's preferences.

        Raises:
            RemoteSearchError: On a non-2xx response or when no recommendation URL is set
            pydantic.ValidationError: If the body does not match the schema
        """
        url = self._require(self._recommend_url, "recommendation")
        logger.info("[RemoteSearch] Recommending from items=%d url=%s", len(available_items), url)
        response = await self._client.post(
            url,
            json={"userPreferences": preferences, "availableItems": available_items},
        )
        return RemoteRecommendationResponse.model_validate(self._handle_response(response))

    def _require(self, url: str | None, purpose: str) -> str:
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")
        if not url:
            raise RemoteSearchError(f"Remote {purpose} URL is not configured.")
        return url

    def _handle_response(self, response: httpx.Response) -> Any:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            payload: Any | None = None
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            raise RemoteSearchError(
                f"Remote search error ({response.status_code}).",
                status_code=response.status_code,
                payload=payload,
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteSearchError(
                "Remote search returned a non-JSON body.",
                status_code=response.status_code,
                payload=response.text,
            ) from exc
