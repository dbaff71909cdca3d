"""
Tests for unfurl/extractors/ogp.py Open Graph extraction.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from unfurl.config import UnfurlConfig
from unfurl.errors import FetchFailed
from unfurl.extractors.ogp import OgpExtractor, get_meta_content
from unfurl.fetcher import FetchMode
from unfurl.models import OgpMetadata
from unfurl.parser import parse_html
from unfurl.router import ExtractorKind

BASE = "https://ex.com/page"


def page(head: str) -> str:
    return f"<html><head>{head}</head><body></body></html>"


def extract(head: str, base: str = BASE) -> OgpMetadata:
    return OgpExtractor.extract(parse_html(page(head)), base)


class TestTitle:
    """Test title derivation order."""

    def test_og_title_wins_over_title_element(self):
        data = extract('<title>Page</title><meta property="og:title" content="OG">')
        assert data.title == "OG"

    def test_falls_back_to_title_element(self):
        data = extract('<title>  Page Title \n</title>')
        assert data.title == "Page Title"

    def test_blank_og_title_falls_back(self):
        data = extract('<title>Page</title><meta property="og:title" content="   ">')
        assert data.title == "Page"

    def test_no_title_at_all(self):
        assert extract('').title is None

    def test_empty_title_element_is_absent(self):
        assert extract('<title>   </title>').title is None


class TestSimpleFields:
    """Test site name and description."""

    def test_site_name_and_description_trimmed(self):
        data = extract(
            '<meta property="og:site_name" content=" Site ">'
            '<meta property="og:description" content=" Desc ">'
        )
        assert data.site_name == "Site"
        assert data.description == "Desc"

    def test_empty_values_are_absent(self):
        data = extract(
            '<meta property="og:site_name" content="">'
            '<meta property="og:description">'
        )
        assert data.site_name is None
        assert data.description is None

    def test_name_attribute_accepted(self):
        data = extract('<meta name="og:description" content="From name">')
        assert data.description == "From name"

    def test_property_attribute_preferred_over_name(self):
        data = extract(
            '<meta name="og:title" content="Name">'
            '<meta property="og:title" content="Property">'
        )
        assert data.title == "Property"

    def test_get_meta_content_missing(self):
        assert get_meta_content(parse_html(page('<meta charset="utf-8">')), 'og:title') is None


class TestImageUrl:
    """Test og:image resolution."""

    def test_absolute_image_unchanged(self):
        url = "https://cdn.example.com/img.png?w=1200"
        data = extract(f'<meta property="og:image" content="{url}">')
        assert data.image_url == url

    def test_relative_image_resolved(self):
        data = extract('<meta property="og:image" content="/img.png">')
        assert data.image_url == "https://ex.com/img.png"

    def test_unresolvable_image_is_absent(self):
        data = extract('<meta property="og:image" content="/img.png">', base="not a url")
        assert data.image_url is None

    def test_scheme_only_image_is_absent(self):
        """http: without an authority cannot be resolved and is dropped."""
        data = extract('<meta property="og:image" content="http:img.png">')
        assert data.image_url is None

    def test_missing_image(self):
        assert extract('').image_url is None


class TestUrl:
    """Test canonical URL selection."""

    def test_og_url_wins(self):
        data = extract('<meta property="og:url" content=" https://ex.com/canonical ">')
        assert data.url == "https://ex.com/canonical"

    def test_blank_og_url_uses_base(self):
        data = extract('<meta property="og:url" content="  ">')
        assert data.url == BASE

    def test_missing_og_url_uses_base(self):
        assert extract('').url == BASE


class TestFullPage:
    """Test extraction of complete pages."""

    def test_full_page(self, ogp_page):
        data = OgpExtractor.extract(parse_html(ogp_page), BASE)
        assert data == OgpMetadata(
            url=BASE,
            title="Hello",
            site_name="Example Site",
            image_url="https://ex.com/img.png",
            description="First line\nSecond line",
        )
        assert data.type == "ogp"

    def test_bare_page_has_only_url(self, bare_page):
        data = OgpExtractor.extract(parse_html(bare_page), BASE)
        assert data == OgpMetadata(url=BASE)


class TestOgpExtractorUnfurl:
    """Test fetching through the extractor."""

    @pytest.fixture
    def fetcher(self, config, ogp_page):
        fetcher = MagicMock()
        fetcher.config = config
        fetcher.fetch_document = AsyncMock(return_value=parse_html(ogp_page))
        return fetcher

    def test_kind(self, fetcher):
        assert OgpExtractor(fetcher).kind is ExtractorKind.OGP

    @pytest.mark.asyncio
    async def test_unfurl_fetches_static_document(self, fetcher):
        data = await OgpExtractor(fetcher).unfurl(BASE)
        fetcher.fetch_document.assert_awaited_once_with(BASE, FetchMode.STATIC)
        assert data.title == "Hello"

    @pytest.mark.asyncio
    async def test_unfurl_renders_when_configured(self, fetcher):
        data = await OgpExtractor(fetcher, UnfurlConfig(render_pages=True)).unfurl(BASE)
        fetcher.fetch_document.assert_awaited_once_with(BASE, FetchMode.RENDERED)
        assert data.title == "Hello"

    @pytest.mark.asyncio
    async def test_unfurl_propagates_fetch_failure(self, fetcher):
        fetcher.fetch_document = AsyncMock(side_effect=FetchFailed(BASE, 404, "Not Found"))
        with pytest.raises(FetchFailed):
            await OgpExtractor(fetcher).unfurl(BASE)
