"""HTTP offer provider — posts the search to the offers gateway and validates the replies."""

import asyncio
import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from truefare.config import settings
from truefare.schemas.offers import CarOption, FlightOption, HotelOption
from truefare.schemas.search import SearchParams
from truefare.services.providers.base import OfferProvider, ProviderError

logger = logging.getLogger(__name__)

OfferT = TypeVar("OfferT", bound=BaseModel)


def classify_http_status(status_code: int | None) -> str:
    if status_code == 429:
        return "rate_limit"
    if status_code in {401, 403}:
        return "auth"
    return "http"


class HttpOfferProvider(OfferProvider):
    """Client for a gateway exposing POST /flights, /hotels and /cars.

    Each endpoint takes the SearchParams JSON and answers with
    ``{"<category>": [...]}``. Items that fail validation are dropped and
    logged; a reply that is not JSON at all is a ProviderError.
    """

    name = "http"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        max_retries: int | None = None,
        request_timeout: float | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = settings.offers_api_base_url if base_url is None else base_url
        self.api_key = settings.offers_api_key if api_key is None else api_key
        self.max_retries = settings.provider_max_retries if max_retries is None else max_retries
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries}")
        self.request_timeout = request_timeout or settings.provider_request_timeout_seconds
        self.backoff_seconds = settings.provider_backoff_seconds if backoff_seconds is None else backoff_seconds
        self._transport = transport
        self._semaphore = asyncio.Semaphore(settings.provider_concurrency)
        self._client: httpx.AsyncClient | None = None

    @property
    def worst_case_seconds(self) -> float:
        """Longest a fetch can take: every attempt timing out, plus the backoffs between them."""
        backoff = sum(self.backoff_seconds * 2 ** attempt for attempt in range(self.max_retries - 1))
        return self.max_retries * self.request_timeout + backoff

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.request_timeout,
                transport=self._transport,
            )
        return self._client

    async def fetch_flights(self, params: SearchParams) -> list[FlightOption]:
        return await self._fetch("flights", params, FlightOption)

    async def fetch_hotels(self, params: SearchParams) -> list[HotelOption]:
        return await self._fetch("hotels", params, HotelOption)

    async def fetch_cars(self, params: SearchParams) -> list[CarOption]:
        return await self._fetch("cars", params, CarOption)

    async def _fetch(self, category: str, params: SearchParams, model: type[OfferT]) -> list[OfferT]:
        if not self.base_url:
            raise ProviderError(
                f"No offers gateway configured for {category}",
                category=category,
                error_type="not_configured",
            )

        payload = await self._post_json(category, params.model_dump(mode="json"))
        items = payload.get(category) or []
        if not isinstance(items, list):
            raise ProviderError(
                f"{category} reply has no list under '{category}'",
                category=category,
                error_type="parse",
                raw_payload=payload,
            )

        offers = []
        for item in items:
            try:
                offers.append(model.model_validate(item))
            except ValidationError as e:
                item_id = item.get("id", "?") if isinstance(item, dict) else "?"
                logger.warning(f"Dropping invalid {category} offer {item_id}: {e.error_count()} errors")
        return offers

    async def _post_json(self, category: str, body: dict) -> dict[str, Any]:
        client = await self._get_client()
        async with self._semaphore:
            for attempt in range(self.max_retries):
                last = attempt == self.max_retries - 1
                try:
                    resp = await client.post(f"/{category}", json=body)
                    if resp.status_code == 429 and not last:
                        await self._backoff(attempt)
                        continue
                    resp.raise_for_status()
                    data = resp.json()
                    if not isinstance(data, dict):
                        raise ValueError("top-level JSON is not an object")
                    return data
                except httpx.HTTPStatusError as e:
                    status = e.response.status_code
                    logger.warning(f"{category} provider returned {status}")
                    if status >= 500 and not last:
                        await self._backoff(attempt)
                        continue
                    raise ProviderError(
                        f"{category} provider status {status}",
                        category=category,
                        error_type=classify_http_status(status),
                        http_status=status,
                    ) from e
                except httpx.TimeoutException as e:
                    logger.warning(f"{category} provider timeout (attempt {attempt + 1})")
                    if not last:
                        await self._backoff(attempt)
                        continue
                    raise ProviderError(
                        f"{category} provider timeout: {e}", category=category, error_type="timeout"
                    ) from e
                except httpx.RequestError as e:
                    logger.warning(f"{category} provider request error: {e}")
                    if not last:
                        await self._backoff(attempt)
                        continue
                    raise ProviderError(
                        f"{category} provider request error: {e}", category=category, error_type="network"
                    ) from e
                except ValueError as e:
                    raise ProviderError(
                        f"{category} provider sent malformed JSON: {e}", category=category, error_type="parse"
                    ) from e

    async def _backoff(self, attempt: int):
        await asyncio.sleep(self.backoff_seconds * 2 ** attempt)

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None
