"""
Link Store Client

This module defines the interface the controller uses to reach the link
store, and the HTTP implementation of it.

The interface defines the three operations the front end needs. Keeping it
abstract lets the controller run against the HTTP API, an in-memory store in
tests, or any other backend without changes.

Wire format (JSON):
- POST /api/links/search  {"query": ...}  ->  {"results": [link, ...]}
- GET  /api/links/{alias}                 ->  link
- POST /api/links         {"url": ...}    ->  link
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import httpx
from pydantic import ValidationError

from linkfinder.api.schemas import CreateRequest, LinkPayload, SearchRequest, SearchResponse
from linkfinder.clients.logging import add_logging_hooks
from linkfinder.core.exceptions import (
    AliasConflictError,
    LinkCreateError,
    LinkLookupError,
    LinkNotFoundError,
    SearchFailedError,
)
from linkfinder.core.setting import settings
from linkfinder.core.validators import alias_path_segment, validate_url_length

logger = logging.getLogger(__name__)

LINKS_PATH = "/api/links"


class LinkStore(ABC):
    """
    Abstract base class for link stores.

    All three operations are coroutines and must tolerate being awaited
    concurrently (a search and an earlier lookup may both be outstanding) and
    being cancelled at any await point.
    """

    @abstractmethod
    async def search(self, query: str) -> List[LinkPayload]:
        """
        Find links whose alias or destination match a partial query.

        Raises:
            SearchFailedError: On transport or server error
        """
        pass

    @abstractmethod
    async def lookup(self, alias: str) -> LinkPayload:
        """
        Fetch one link by its exact alias.

        Raises:
            LinkNotFoundError: If the alias does not exist
            LinkLookupError: On transport or server error
        """
        pass

    @abstractmethod
    async def create(self, target: str) -> LinkPayload:
        """
        Create a short link for a destination; the store assigns the alias.

        Raises:
            AliasConflictError: If the store reports an alias collision
            LinkCreateError: On transport or server error
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the store."""
        return None


class HttpLinkStore(LinkStore):
    """
    Link store reached over its JSON HTTP API.

    Transport and decoding failures are translated into the exceptions the
    interface promises; nothing httpx-specific leaks to callers.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the HTTP link store.

        Args:
            base_url: Root of the link store API (default: settings.LINK_STORE_URL)
            timeout: Per-request timeout in seconds (default: settings.REQUEST_TIMEOUT_SECONDS)
            client: Preconfigured client to use instead of creating one; it is
                not closed by aclose()
        """
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                base_url=base_url or settings.LINK_STORE_URL,
                timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT_SECONDS,
            )
        self._client = add_logging_hooks(client)

    async def search(self, query: str) -> List[LinkPayload]:
        body = SearchRequest(query=query).model_dump()
        try:
            response = await self._client.post(f"{LINKS_PATH}/search", json=body)
            response.raise_for_status()
            return SearchResponse.model_validate(response.json()).results
        except httpx.HTTPStatusError as e:
            raise SearchFailedError(
                query,
                reason=f"Search returned HTTP {e.response.status_code}",
                original_error=e
            )
        except httpx.HTTPError as e:
            raise SearchFailedError(query, reason="Search request failed", original_error=e)
        except (ValueError, ValidationError) as e:
            raise SearchFailedError(query, reason="Malformed search response", original_error=e)

    async def lookup(self, alias: str) -> LinkPayload:
        segment = alias_path_segment(alias)
        if not segment:
            # No stored link can carry this alias
            raise LinkNotFoundError(alias)

        try:
            response = await self._client.get(f"{LINKS_PATH}/{segment}")
            if response.status_code == httpx.codes.NOT_FOUND:
                raise LinkNotFoundError(alias)
            response.raise_for_status()
            return LinkPayload.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise LinkLookupError(
                alias,
                reason=f"Lookup returned HTTP {e.response.status_code}",
                original_error=e
            )
        except httpx.HTTPError as e:
            raise LinkLookupError(alias, reason="Lookup request failed", original_error=e)
        except (ValueError, ValidationError) as e:
            raise LinkLookupError(alias, reason="Malformed lookup response", original_error=e)

    async def create(self, target: str) -> LinkPayload:
        if not validate_url_length(target):
            raise LinkCreateError(target, reason="Target is empty or too long")

        body = CreateRequest(url=target).model_dump()
        try:
            response = await self._client.post(LINKS_PATH, json=body)
            if response.status_code == httpx.codes.CONFLICT:
                raise AliasConflictError(target, alias=self._conflicting_alias(response))
            response.raise_for_status()
            return LinkPayload.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise LinkCreateError(
                target,
                reason=f"Create returned HTTP {e.response.status_code}",
                original_error=e
            )
        except httpx.HTTPError as e:
            raise LinkCreateError(target, reason="Create request failed", original_error=e)
        except (ValueError, ValidationError) as e:
            raise LinkCreateError(target, reason="Malformed create response", original_error=e)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def _conflicting_alias(response: httpx.Response) -> Optional[str]:
        """Extract the colliding alias from a 409 body, if the store sent one."""
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict) and isinstance(data.get("alias"), str):
            return data["alias"]
        return None
