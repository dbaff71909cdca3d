"""
Social embed extractor for X (Twitter) posts.

Metadata comes from the platform's oEmbed endpoint. The embed HTML in the
oEmbed response is optionally rendered in a headless browser to recover the
post text and its first attached photo; both are best-effort and never fail
the request.
"""
import logging
from typing import Any, Dict, Optional

from bs4 import BeautifulSoup

from unfurl.errors import UnfurlError
from unfurl.extractors.base import Extractor
from unfurl.models import SocialMetadata
from unfurl.parser import parse_html
from unfurl.router import ExtractorKind
from unfurl.utils import clean_text, resolve_url

logger = logging.getLogger(__name__)

SITE_NAME = "X (Twitter)"

# Rendered widgets mark the post body; the raw oEmbed fragment uses a blockquote
BODY_SELECTORS = ['[data-testid="tweetText"]', 'blockquote p']
PHOTO_SUFFIX = "/photo/1"
EMBED_READY_SELECTOR = "iframe"


def find_body_text(doc: BeautifulSoup) -> Optional[str]:
    """Return the text of the embed's primary text node, if any."""
    for selector in BODY_SELECTORS:
        node = doc.select_one(selector)
        if node is not None:
            for br in node.find_all('br'):
                br.replace_with('\n')
            text = clean_text(node.get_text())
            if text:
                return text
    return None


def find_photo_url(doc: BeautifulSoup, canonical_url: str) -> Optional[str]:
    """Return the src of the image linked to `<canonical_url>/photo/1`, if any."""
    target = canonical_url.rstrip('/') + PHOTO_SUFFIX
    for link in doc.find_all('a', href=True):
        if link['href'] != target:
            continue
        img = link.find('img', src=True)
        if img is not None:
            return img['src']
    return None


class SocialExtractor(Extractor):
    """Extract post metadata through the oEmbed API."""

    kind = ExtractorKind.SOCIAL

    async def fetch_oembed(self, url: str) -> Dict[str, Any]:
        """
        Fetch the oEmbed payload for a post URL.

        Raises:
            FetchFailed: If the endpoint responds with a non-success status
            ParseFailed: If the response is not a JSON object
        """
        return await self.fetcher.fetch_json(
            self.config.oembed_endpoint,
            params={'url': url},
            headers={'User-Agent': self.config.oembed_user_agent},
        )

    async def unfurl(self, url: str) -> SocialMetadata:
        data = await self.fetch_oembed(url)

        canonical_url = clean_text(data.get('url')) or url
        embed_html = data.get('html') or ""
        body_text, photo_url = await self._extract_embed(embed_html, canonical_url)

        return SocialMetadata(
            url=canonical_url,
            site_name=SITE_NAME,
            author_name=clean_text(data.get('author_name')),
            author_url=clean_text(data.get('author_url')),
            body_text=body_text,
            photo_url=photo_url,
        )

    async def _extract_embed(self, embed_html: str, canonical_url: str):
        """Recover body text and photo URL from the embed fragment."""
        if not embed_html.strip():
            return None, None

        doc = None
        if self.config.render_social:
            try:
                rendered = await self.fetcher.render_fragment(embed_html, EMBED_READY_SELECTOR)
                doc = parse_html(rendered)
            except Exception as e:
                logger.warning(f"Could not render embed for {canonical_url}: {e}")

        if doc is None:
            try:
                doc = parse_html(embed_html)
            except UnfurlError as e:
                logger.warning(f"Could not parse embed for {canonical_url}: {e}")
                return None, None

        body_text = None
        try:
            body_text = find_body_text(doc)
        except Exception as e:
            logger.warning(f"Body text extraction failed for {canonical_url}: {e}")

        photo_url = None
        try:
            photo = find_photo_url(doc, canonical_url)
            if photo:
                photo_url = resolve_url(photo, canonical_url)
        except Exception as e:
            logger.warning(f"Photo extraction failed for {canonical_url}: {e}")

        return body_text, photo_url
