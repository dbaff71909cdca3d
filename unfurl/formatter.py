"""
Render metadata records as Markdown lines.

Formatting is a pure function of the record and the configuration: the same
input always yields the same lines.
"""
from typing import List, Optional

from unfurl.config import UnfurlConfig
from unfurl.models import Metadata, OgpMetadata, SocialMetadata
from unfurl.utils import collapse_newlines, split_lines

QUOTE = "> "
PLACEHOLDER_URL = "#"


def quote(text: str) -> str:
    return f"{QUOTE}{text}"


def markdown_link(text: str, url: Optional[str]) -> str:
    """
    Create a Markdown link, collapsing line breaks in the link text.

    An empty url or the "#" placeholder both render as "#".
    """
    target = url if url and url != PLACEHOLDER_URL else PLACEHOLDER_URL
    return f"[{collapse_newlines(text)}]({target})"


def quote_lines(text: str) -> List[str]:
    """Quote every line of a multi-line text, one output line per segment."""
    return [quote(line) for line in split_lines(text)]


def _format_ogp(data: OgpMetadata) -> List[str]:
    lines = []
    if data.site_name:
        lines.append(quote(f"*{data.site_name}*"))
    if data.title:
        lines.append(quote(markdown_link(data.title, data.url)))
    if data.image_url:
        lines.append(data.image_url)
    if data.description:
        lines.extend(quote_lines(data.description))
    return lines


def _format_social(data: SocialMetadata) -> List[str]:
    lines = []
    if data.site_name:
        lines.append(quote(f"*{data.site_name}*"))
    if data.author_url:
        lines.append(quote(markdown_link(data.author_name or data.author_url, data.author_url)))
    if data.body_text:
        lines.extend(quote_lines(data.body_text))
    return lines


def format_metadata(data: Metadata, config: Optional[UnfurlConfig] = None) -> List[str]:
    """
    Render a metadata record as output lines.

    Args:
        data: An OgpMetadata or SocialMetadata record
        config: Rendering options; `fallback_link` emits a self-link when
            nothing else would be rendered

    Returns:
        Ordered list of lines (possibly empty)
    """
    if isinstance(data, OgpMetadata):
        lines = _format_ogp(data)
    elif isinstance(data, SocialMetadata):
        lines = _format_social(data)
    else:
        raise TypeError(f"Unsupported metadata: {type(data).__name__}")

    if not lines and config is not None and config.fallback_link and data.url:
        lines = [quote(markdown_link(data.url, data.url))]
    return lines
