"""
Content fetching for unfurl.

Retrieves remote pages and oEmbed JSON over HTTP (aiohttp), and renders
pages that need script execution in a headless browser (playwright). A
Fetcher owns one aiohttp session for the lifetime of its `async with`
block; browser processes are launched per call and always closed before
the call returns.
"""
import asyncio
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import aiohttp
from bs4 import BeautifulSoup
from playwright.async_api import async_playwright
from playwright.async_api import Error as PlaywrightError

from unfurl.config import UnfurlConfig
from unfurl.errors import FetchFailed, ParseFailed
from unfurl.parser import parse_html

logger = logging.getLogger(__name__)


class FetchMode(Enum):
    """How a document is retrieved."""
    STATIC = "static"  # single HTTP GET
    RENDERED = "rendered"  # headless browser, after scripts run


class Fetcher:
    """
    Fetch web content for metadata extraction.

    Usage:
        async with Fetcher(config) as fetcher:
            doc = await fetcher.fetch_document(url)

    Args:
        config: Network and browser settings (defaults if None)
        session: Existing aiohttp session to use; the caller keeps ownership
    """

    def __init__(self, config: Optional[UnfurlConfig] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        self.config = config or UnfurlConfig()
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "Fetcher":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={'User-Agent': self.config.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close the session if this fetcher created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Fetcher must be used inside 'async with'")
        return self._session

    def _request_kwargs(self, headers: Optional[Dict[str, str]]) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {'allow_redirects': True}
        if headers:
            kwargs['headers'] = headers
        if not self.config.verify_ssl:
            kwargs['ssl'] = False
        return kwargs

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def fetch_text(self, url: str, headers: Optional[Dict[str, str]] = None,
                         params: Optional[Dict[str, str]] = None) -> str:
        """
        Fetch a URL and return its body as text.

        Args:
            url: The URL to fetch (http, https or file)
            headers: Extra request headers
            params: Query parameters

        Returns:
            Response body

        Raises:
            FetchFailed: On a non-2xx status, timeout or connection error
        """
        if urlparse(url).scheme.lower() == 'file':
            return await self._read_file(url)

        kwargs = self._request_kwargs(headers)
        if params:
            kwargs['params'] = params

        logger.debug(f"GET {url}")
        try:
            async with self.session.get(url, **kwargs) as response:
                body = await response.text(errors='replace')
                if not 200 <= response.status < 300:
                    raise FetchFailed(url, response.status, body)
                return body
        except asyncio.TimeoutError as e:
            raise FetchFailed(url, None, "Request timeout") from e
        except aiohttp.ClientError as e:
            raise FetchFailed(url, None, str(e) or "Connection error") from e

    async def fetch_json(self, url: str, params: Optional[Dict[str, str]] = None,
                         headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        Fetch a URL and decode its body as a JSON object.

        Raises:
            FetchFailed: On a non-2xx status or network error
            ParseFailed: If the body is not a JSON object
        """
        body = await self.fetch_text(url, headers=headers, params=params)
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ParseFailed(url, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ParseFailed(url, "expected a JSON object")
        return data

    async def fetch_bytes(self, url: str) -> bytes:
        """
        Fetch a URL and return the raw body.

        Raises:
            FetchFailed: On a non-2xx status or network error
        """
        kwargs = self._request_kwargs(None)
        try:
            async with self.session.get(url, **kwargs) as response:
                if not 200 <= response.status < 300:
                    raise FetchFailed(url, response.status, "")
                return await response.read()
        except asyncio.TimeoutError as e:
            raise FetchFailed(url, None, "Request timeout") from e
        except aiohttp.ClientError as e:
            raise FetchFailed(url, None, str(e) or "Connection error") from e

    async def _read_file(self, url: str) -> str:
        """Read a file: URL from the local filesystem."""
        path = Path(url2pathname(urlparse(url).path))
        try:
            return await asyncio.to_thread(path.read_text, encoding='utf-8', errors='replace')
        except FileNotFoundError as e:
            raise FetchFailed(url, 404, "File not found") from e
        except OSError as e:
            raise FetchFailed(url, None, str(e)) from e

    async def fetch_document(self, url: str, mode: FetchMode = FetchMode.STATIC) -> BeautifulSoup:
        """
        Fetch a page and parse it into a document.

        Args:
            url: The page URL
            mode: STATIC for a plain GET, RENDERED for a headless browser

        Raises:
            FetchFailed: If retrieval fails
            ParseFailed: If the content yields no document
        """
        if mode is FetchMode.RENDERED:
            markup = await self.render(url)
        else:
            markup = await self.fetch_text(url)
        return parse_html(markup, url)

    # ------------------------------------------------------------------
    # Headless browser
    # ------------------------------------------------------------------

    @property
    def _render_timeout_ms(self) -> int:
        return self.config.render_timeout * 1000

    async def _launch(self, playwright):
        return await playwright.chromium.launch(
            headless=self.config.headless,
            executable_path=self.config.browser_executable,
        )

    async def render(self, url: str) -> str:
        """
        Navigate a headless browser to a URL and return the rendered markup.

        Waits for `render_ready_selector` when configured, otherwise for the
        network to go idle.

        Raises:
            FetchFailed: If navigation fails or the response is not ok
        """
        logger.debug(f"Rendering {url}")
        async with async_playwright() as playwright:
            browser = await self._launch(playwright)
            try:
                page = await browser.new_page(user_agent=self.config.user_agent)
                try:
                    response = await page.goto(url, timeout=self._render_timeout_ms)
                except PlaywrightError as e:
                    raise FetchFailed(url, None, str(e)) from e
                if response is None:
                    raise FetchFailed(url, None, "No response from navigation")
                if not response.ok:
                    raise FetchFailed(url, response.status, response.status_text)

                try:
                    if self.config.render_ready_selector:
                        await page.wait_for_selector(
                            self.config.render_ready_selector, timeout=self._render_timeout_ms
                        )
                    else:
                        await page.wait_for_load_state('networkidle', timeout=self._render_timeout_ms)
                except PlaywrightError as e:
                    raise FetchFailed(url, None, f"Page never became ready: {e}") from e

                return await page.content()
            finally:
                await browser.close()

    async def render_fragment(self, html: str, ready_selector: str = "iframe") -> str:
        """
        Load an HTML fragment into a blank page and return the rendered markup.

        The markup of every child frame is appended after the page's own, so
        content that scripts move into iframes can be queried as one document.

        Raises:
            PlaywrightError: If the fragment cannot be loaded or never becomes ready
        """
        async with async_playwright() as playwright:
            browser = await self._launch(playwright)
            try:
                page = await browser.new_page(user_agent=self.config.user_agent)
                await page.set_content(html, timeout=self._render_timeout_ms)
                await page.wait_for_selector(ready_selector, timeout=self._render_timeout_ms)
                await page.wait_for_load_state('networkidle', timeout=self._render_timeout_ms)

                parts = [await page.content()]
                for frame in page.frames:
                    if frame is page.main_frame:
                        continue
                    parts.append(await frame.content())
                return "\n".join(parts)
            finally:
                await browser.close()
