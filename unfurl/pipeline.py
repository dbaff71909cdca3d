"""
The unfurl pipeline: URL -> validate -> route -> extract -> format.

Each URL is unfurled as one independent asyncio task with its own Fetcher;
nothing mutable is shared between concurrent requests.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from unfurl.config import UnfurlConfig
from unfurl.errors import InvalidUrl
from unfurl.extractors import get_extractor
from unfurl.fetcher import Fetcher
from unfurl.formatter import format_metadata
from unfurl.images import image_lines
from unfurl.models import Metadata
from unfurl.router import SourceRouter
from unfurl.utils import validate_url

logger = logging.getLogger(__name__)


@dataclass
class UnfurlResult:
    """Outcome of unfurling a single URL."""
    url: str
    lines: List[str] = field(default_factory=list)
    metadata: Optional[Metadata] = None
    error: Optional[Exception] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            'url': self.url,
            'success': self.success,
            'lines': self.lines,
            'metadata': self.metadata.to_dict() if self.metadata else None,
            'error': str(self.error) if self.error else None,
        }


async def fetch_metadata(url: str, config: Optional[UnfurlConfig] = None,
                         fetcher: Optional[Fetcher] = None) -> Metadata:
    """
    Fetch and extract metadata for a URL.

    Args:
        url: The URL to unfurl
        config: Settings (defaults if None)
        fetcher: Open Fetcher to use; a new one is opened when None

    Raises:
        InvalidUrl: If the URL is rejected
        FetchFailed: If the remote content cannot be retrieved
        ParseFailed: If the content cannot be parsed
    """
    config = config or UnfurlConfig()
    if not validate_url(url):
        raise InvalidUrl(url, "expected an http, https or file URL")

    kind = SourceRouter(config.social_hosts).route(url)
    logger.info(f"Fetching metadata for {url} ({kind.value})")

    if fetcher is None:
        async with Fetcher(config) as owned:
            return await get_extractor(kind, owned, config).unfurl(url)
    return await get_extractor(kind, fetcher, config).unfurl(url)


async def unfurl_result(url: str, config: Optional[UnfurlConfig] = None) -> UnfurlResult:
    """
    Unfurl a URL into metadata and formatted lines.

    Raises:
        InvalidUrl, FetchFailed, ParseFailed: On fatal errors
    """
    config = config or UnfurlConfig()
    async with Fetcher(config) as fetcher:
        metadata = await fetch_metadata(url, config, fetcher)
        lines = format_metadata(metadata, config)
        if config.download_images:
            lines = lines + await image_lines(metadata, fetcher, config)
    return UnfurlResult(url=url, lines=lines, metadata=metadata)


async def unfurl_url(url: str, config: Optional[UnfurlConfig] = None) -> List[str]:
    """Unfurl a URL and return the formatted lines."""
    result = await unfurl_result(url, config)
    return result.lines


async def unfurl_many(urls: List[str], config: Optional[UnfurlConfig] = None) -> List[UnfurlResult]:
    """
    Unfurl several URLs concurrently.

    A failing URL does not affect the others; its error is recorded on the
    result. Results are returned in input order.
    """
    config = config or UnfurlConfig()

    async def run_one(url: str) -> UnfurlResult:
        try:
            return await unfurl_result(url, config)
        except Exception as e:
            logger.error(f"Error processing {url}: {e}")
            return UnfurlResult(url=url, error=e)

    return list(await asyncio.gather(*(run_one(url) for url in urls)))


def run_unfurl(url: str, config: Optional[UnfurlConfig] = None) -> List[str]:
    """Synchronous wrapper for unfurl_url."""
    return asyncio.run(unfurl_url(url, config))
