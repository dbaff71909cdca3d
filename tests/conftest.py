import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from unfurl.config import UnfurlConfig


_OGP_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Fallback Title</title>
  <meta property="og:title" content="  Hello  ">
  <meta property="og:site_name" content="Example Site">
  <meta property="og:description" content="First line
Second line">
  <meta property="og:image" content="/img.png">
</head>
<body><p>Body</p></body>
</html>"""

_BARE_PAGE = "<html><head></head><body><p>Nothing to see</p></body></html>"

_OEMBED_PAYLOAD = {
    "url": "https://twitter.com/jack/status/20",
    "author_name": "jack",
    "author_url": "https://twitter.com/jack",
    "html": (
        '<blockquote class="twitter-tweet"><p lang="en" dir="ltr">'
        'just setting up my twttr</p>&mdash; jack (@jack) '
        '<a href="https://twitter.com/jack/status/20">March 21, 2006</a></blockquote>\n'
        '<script async src="https://platform.twitter.com/widgets.js" charset="utf-8"></script>'
    ),
    "type": "rich",
}

_RENDERED_EMBED = """<html><body>
<div data-testid="tweetText">just setting up<br>my twttr</div>
<a href="https://twitter.com/jack/status/20/photo/1"><img src="https://pbs.twimg.com/media/abc.jpg"></a>
<a href="https://twitter.com/someone/status/99/photo/1"><img src="https://pbs.twimg.com/media/other.jpg"></a>
</body></html>"""


@pytest.fixture
def config():
    """Default configuration, isolated from user files."""
    return UnfurlConfig()


@pytest.fixture
def ogp_page():
    """A page with og:title, og:site_name, a two-line og:description and a relative og:image."""
    return _OGP_PAGE


@pytest.fixture
def bare_page():
    """A page with no Open Graph tags and no <title>."""
    return _BARE_PAGE


@pytest.fixture
def oembed_payload():
    """An oEmbed response for a post; a fresh copy per test."""
    return dict(_OEMBED_PAYLOAD)


@pytest.fixture
def rendered_embed():
    """Embed markup as it looks after the widget script has run."""
    return _RENDERED_EMBED


@pytest.fixture
def make_response():
    """
    Factory for mock aiohttp responses.

    Usage:
        def test_something(make_response):
            response = make_response(404, "Not Found")
    """
    def _make(status=200, text="", body=b""):
        response = MagicMock()
        response.status = status
        response.text = AsyncMock(return_value=text)
        response.read = AsyncMock(return_value=body)
        return response
    return _make


@pytest.fixture
def make_session():
    """Factory for mock aiohttp sessions whose get() yields the given responses in order."""
    def _make(*responses):
        contexts = [
            AsyncMock(
                __aenter__=AsyncMock(return_value=response),
                __aexit__=AsyncMock(return_value=False),
            )
            for response in responses
        ]
        session = MagicMock()
        session.get = MagicMock(side_effect=contexts)
        session.close = AsyncMock()
        return session
    return _make


@pytest.fixture
def patch_session(make_session):
    """
    Factory patching the session a Fetcher creates for itself.

    Usage:
        with patch_session(make_response(200, page)) as factory:
            ...
    """
    def _patch(*responses):
        return patch('unfurl.fetcher.aiohttp.ClientSession', return_value=make_session(*responses))
    return _patch


@pytest.fixture
def fake_playwright():
    """Patch playwright with a fake browser whose page serves canned markup."""
    page = MagicMock()
    page.goto = AsyncMock(return_value=MagicMock(ok=True, status=200, status_text="OK"))
    page.content = AsyncMock(return_value=_OGP_PAGE)
    page.set_content = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.wait_for_load_state = AsyncMock()
    page.main_frame = MagicMock()
    page.frames = [page.main_frame]

    browser = MagicMock()
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)

    manager = MagicMock()
    manager.__aenter__ = AsyncMock(return_value=playwright)
    manager.__aexit__ = AsyncMock(return_value=False)

    with patch('unfurl.fetcher.async_playwright', return_value=manager) as factory:
        yield SimpleNamespace(
            page=page,
            browser=browser,
            playwright=playwright,
            manager=manager,
            factory=factory,
        )
