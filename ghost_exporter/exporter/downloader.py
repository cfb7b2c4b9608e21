"""
Asset downloader for fetching Ghost images.

Uses aiohttp for parallel asynchronous downloads.
"""

import asyncio
from typing import Optional

import aiohttp
from aiohttp import ClientTimeout, ClientError

from ..errors import AssetDownloadError
from ..utils.constants import DEFAULT_CONCURRENCY, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ..utils.log import get_logger
from ..utils.paths import ensure_parent_dir


class AssetDownloader:
    """
    Downloads remote images to local files.

    Handles parallel downloads with a concurrency limit. A failed download
    raises ``AssetDownloadError``; callers decide whether that is fatal.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        concurrency: int = DEFAULT_CONCURRENCY,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the asset downloader.

        Args:
            timeout: Request timeout in seconds
            concurrency: Maximum concurrent downloads
            user_agent: User agent string for requests
        """
        self.timeout = ClientTimeout(total=timeout)
        self.concurrency = concurrency
        self.user_agent = user_agent
        self.logger = get_logger("downloader")

        self._semaphore = asyncio.Semaphore(concurrency)
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Open the HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent}
            )

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def download(self, url: str, local_path: str) -> str:
        """
        Download a single asset.

        Args:
            url: Asset URL to download
            local_path: Absolute file path to write to

        Returns:
            The local path

        Raises:
            AssetDownloadError: On HTTP errors, timeouts or write failures
        """
        await self.start()

        async with self._semaphore:
            try:
                async with self._session.get(url, allow_redirects=True) as response:
                    if response.status != 200:
                        raise AssetDownloadError(url, local_path, f"HTTP {response.status}")
                    content = await response.read()

                ensure_parent_dir(local_path)
                with open(local_path, 'wb') as f:
                    f.write(content)

            except ClientError as e:
                raise AssetDownloadError(url, local_path, f"client error: {e}") from e
            except asyncio.TimeoutError as e:
                raise AssetDownloadError(url, local_path, "timeout") from e
            except OSError as e:
                raise AssetDownloadError(url, local_path, f"write error: {e}") from e

        self.logger.debug(f"Downloaded: {url} -> {local_path}")
        return local_path

