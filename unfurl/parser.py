"""
Parser adapter: raw markup to a queryable BeautifulSoup document.
"""
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag

from unfurl.errors import ParseFailed


def parse_html(markup: Union[str, bytes], url: Optional[str] = None) -> BeautifulSoup:
    """
    Parse HTML markup into a document tree.

    Args:
        markup: Raw HTML (str or bytes)
        url: Source of the markup, for error messages

    Returns:
        Parsed document

    Raises:
        ParseFailed: If the markup is empty or yields no elements
    """
    if isinstance(markup, bytes):
        empty = not markup.strip()
    else:
        empty = markup is None or not markup.strip()
    if empty:
        raise ParseFailed(url, "empty content")

    try:
        soup = BeautifulSoup(markup, "html.parser")
    except Exception as e:
        raise ParseFailed(url, str(e)) from e

    if not isinstance(soup.find(), Tag):
        raise ParseFailed(url, "no HTML elements found")
    return soup
