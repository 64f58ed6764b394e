"""
Scryfall card search client.

Resolves a recognized card name to a CardRecord with an exact-name search:

    GET /cards/search?q=!"<name>"&unique=prints

The first card of the result list wins. Scryfall answers a search with no
matches with HTTP 404, which is reported as "not found", not as an error.

API docs: https://scryfall.com/docs/api/cards/search
"""

import asyncio
import logging
from types import TracebackType

import httpx
from pydantic import BaseModel, Field, ValidationError

from mtgscanner.config import settings
from mtgscanner.models.card import CardRecord
from mtgscanner.models.failure import DecodeFailureError, NetworkFailureError

logger = logging.getLogger(__name__)


class ScryfallCard(BaseModel):
    """The subset of a Scryfall card object we read."""

    name: str
    set_name: str
    set_code: str = Field(alias="set")
    tcgplayer_id: int | None = None
    finishes: list[str] | None = None

    def to_record(self) -> CardRecord:
        return CardRecord(
            name=self.name,
            set_name=self.set_name,
            set_code=self.set_code,
            external_id=str(self.tcgplayer_id) if self.tcgplayer_id is not None else None,
            finishes=tuple(self.finishes or ()),
        )


class ScryfallSearchResponse(BaseModel):
    """A Scryfall list object. Missing `data` means no results."""

    data: list[ScryfallCard] = Field(default_factory=list)


def exact_name_query(name: str) -> str:
    """Scryfall search syntax for an exact card name."""
    return f'!"{name}"'


class ScryfallClient:
    """
    Async client for Scryfall card lookups.

    Pass an existing httpx.AsyncClient to share its connection pool; the
    caller then owns closing it. Without one, the client creates its own and
    closes it in aclose().
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the Scryfall client.

        Args:
            base_url: Scryfall API base URL. Defaults to settings.scryfall_base_url.
            timeout: Total deadline per lookup in seconds. Defaults to
                settings.lookup_timeout.
            client: Optional shared httpx client.
        """
        self.base_url = (base_url or settings.scryfall_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.lookup_timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
        )

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_card_by_name(self, name: str) -> CardRecord | None:
        """
        Look up a card by exact name.

        Args:
            name: Card name as recognized

        Returns:
            CardRecord for the first matching printing, or None if Scryfall
            has no card with that name

        Raises:
            NetworkFailureError: On timeout, connection failure, or an HTTP
                status other than 2xx/404
            DecodeFailureError: If the response body is not a Scryfall list
        """
        url = f"{self.base_url}/cards/search"
        params = {"q": exact_name_query(name), "unique": "prints"}

        try:
            async with asyncio.timeout(self.timeout):
                response = await self._client.get(url, params=params)
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.warning("Scryfall lookup timed out for %r", name)
            raise NetworkFailureError(name, "The request timed out.") from e
        except httpx.RequestError as e:
            logger.warning("Scryfall lookup failed for %r: %s", name, e)
            raise NetworkFailureError(name, str(e) or type(e).__name__) from e

        if response.status_code == httpx.codes.NOT_FOUND:
            return None

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Scryfall returned HTTP %d for %r", response.status_code, name)
            raise NetworkFailureError(name, f"HTTP {response.status_code}") from e

        try:
            payload = ScryfallSearchResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning("Scryfall decode error for %r: %s", name, e)
            raise DecodeFailureError(name, str(e)) from e

        if not payload.data:
            return None
        return payload.data[0].to_record()
