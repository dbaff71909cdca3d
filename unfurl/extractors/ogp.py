"""
Generic Open Graph extractor.

Reads og:* meta tags (falling back to <title> for the title) from a page
fetched with a single HTTP GET, or rendered in a headless browser when
`render_pages` is set.
"""
import logging
from typing import Optional

from bs4 import BeautifulSoup

from unfurl.errors import ResolveFailed
from unfurl.extractors.base import Extractor
from unfurl.fetcher import FetchMode
from unfurl.models import OgpMetadata
from unfurl.router import ExtractorKind
from unfurl.utils import clean_text, resolve_url

logger = logging.getLogger(__name__)


def get_meta_content(doc: BeautifulSoup, prop: str) -> Optional[str]:
    """
    Return the raw content attribute of an Open Graph meta tag.

    Tags declared with `property` win; `name` is accepted when no
    `property` tag exists.
    """
    tag = doc.find('meta', attrs={'property': prop})
    if tag is None:
        tag = doc.find('meta', attrs={'name': prop})
    if tag is None:
        return None
    content = tag.get('content')
    if isinstance(content, list):
        content = " ".join(content)
    return content


class OgpExtractor(Extractor):
    """Extract Open Graph metadata from ordinary web pages."""

    kind = ExtractorKind.OGP

    async def unfurl(self, url: str) -> OgpMetadata:
        mode = FetchMode.RENDERED if self.config.render_pages else FetchMode.STATIC
        doc = await self.fetcher.fetch_document(url, mode)
        return self.extract(doc, url)

    @classmethod
    def extract(cls, doc: BeautifulSoup, base_url: str) -> OgpMetadata:
        """
        Build OGP metadata from a parsed page.

        Args:
            doc: Parsed page
            base_url: URL the page was fetched from

        Returns:
            OgpMetadata with absent fields set to None
        """
        return OgpMetadata(
            url=cls._get_url(doc) or base_url,
            title=cls._get_title(doc),
            site_name=clean_text(get_meta_content(doc, 'og:site_name')),
            image_url=cls._get_image_url(doc, base_url),
            description=clean_text(get_meta_content(doc, 'og:description')),
        )

    @staticmethod
    def _get_url(doc: BeautifulSoup) -> Optional[str]:
        return clean_text(get_meta_content(doc, 'og:url'))

    @staticmethod
    def _get_title(doc: BeautifulSoup) -> Optional[str]:
        og_title = clean_text(get_meta_content(doc, 'og:title'))
        if og_title:
            return og_title

        title_tag = doc.find('title')
        if title_tag:
            return clean_text(title_tag.get_text())
        return None

    @staticmethod
    def _get_image_url(doc: BeautifulSoup, base_url: str) -> Optional[str]:
        image_url = get_meta_content(doc, 'og:image')
        if not image_url:
            return None
        try:
            return resolve_url(image_url, base_url)
        except ResolveFailed as e:
            logger.warning(f"Dropping og:image: {e}")
            return None
