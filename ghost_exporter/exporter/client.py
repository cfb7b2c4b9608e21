"""
Ghost Content API client.

Fetches every item of a content kind in one request, with related tags and
authors included inline.
"""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from aiohttp import ClientTimeout, ClientError

from .content import KIND_FIELDS, ContentItem, ContentKind
from ..errors import ContentFetchError
from ..utils.constants import DEFAULT_API_VERSION, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ..utils.log import get_logger


class GhostContentClient:
    """
    Read-only client for the Ghost Content API.

    Any failure to fetch or decode a content kind is raised as
    ``ContentFetchError``; there is no partial result.
    """

    def __init__(
        self,
        url: str,
        key: str,
        version: str = DEFAULT_API_VERSION,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the content client.

        Args:
            url: Ghost site URL
            key: Content API key
            version: Value of the Accept-Version header
            timeout: Request timeout in seconds
            user_agent: User agent string for requests
        """
        self.url = url.rstrip('/')
        self.key = key
        self.version = version
        self.timeout = ClientTimeout(total=timeout)
        self.user_agent = user_agent
        self.logger = get_logger("api")
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Open the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept-Version": self.version,
                }
            )

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    def endpoint(self, kind: ContentKind) -> str:
        return f"{self.url}/ghost/api/content/{KIND_FIELDS[kind].resource}/"

    def params(self, kind: ContentKind) -> Dict[str, str]:
        params = {"key": self.key, "limit": "all"}
        include = KIND_FIELDS[kind].include
        if include:
            params["include"] = include
        return params

    async def fetch_kind(self, kind: ContentKind) -> List[ContentItem]:
        """
        Fetch all items of one kind.

        Args:
            kind: Content kind to fetch

        Returns:
            Items in the order the API returned them

        Raises:
            ContentFetchError: If the request fails or the payload is malformed
        """
        await self.start()
        resource = KIND_FIELDS[kind].resource

        try:
            async with self._session.get(self.endpoint(kind), params=self.params(kind)) as response:
                if response.status != 200:
                    body = await response.text()
                    raise ContentFetchError(resource, f"HTTP {response.status}: {body[:200]}")
                payload = await response.json(content_type=None)
        except ContentFetchError:
            raise
        except ClientError as e:
            raise ContentFetchError(resource, f"client error: {e}") from e
        except asyncio.TimeoutError as e:
            raise ContentFetchError(resource, "timeout") from e
        except ValueError as e:
            raise ContentFetchError(resource, f"invalid JSON: {e}") from e

        records = self._records(resource, payload)
        items = [ContentItem.from_api(kind, record) for record in records]
        self.logger.info(f"Fetched {len(items)} {resource}")
        return items

    @staticmethod
    def _records(resource: str, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict) or not isinstance(payload.get(resource), list):
            raise ContentFetchError(resource, f"response has no '{resource}' list")
        return payload[resource]
