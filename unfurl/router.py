"""
Source routing for unfurl requests.

Inspects a URL's hostname to decide which extractor handles it: social
platform hosts go to the oEmbed-based social extractor, everything else to
the generic Open Graph extractor.
"""
from enum import Enum
from typing import FrozenSet, Iterable, Optional
from urllib.parse import urlparse

from unfurl.errors import InvalidUrl


class ExtractorKind(Enum):
    """Which extractor handles a URL."""
    OGP = "ogp"
    SOCIAL = "social"


# Exact hostnames of the supported social platform (urlparse lowercases hostnames)
SOCIAL_HOSTS: FrozenSet[str] = frozenset({"twitter.com", "x.com"})


def _hostname(url: str) -> Optional[str]:
    """Parse the hostname out of a URL, raising InvalidUrl when unparseable."""
    if not url:
        raise InvalidUrl(url, "empty URL")
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        parsed.port  # raises ValueError for a malformed port
    except ValueError as e:
        raise InvalidUrl(url, str(e)) from e
    if not parsed.scheme:
        raise InvalidUrl(url, "missing scheme")
    return hostname


class SourceRouter:
    """
    Route URLs to an extractor kind by hostname.

    Args:
        social_hosts: Hostnames handled by the social extractor
    """

    def __init__(self, social_hosts: Optional[Iterable[str]] = None):
        self.social_hosts = frozenset(social_hosts) if social_hosts is not None else SOCIAL_HOSTS

    def route(self, url: str) -> ExtractorKind:
        """
        Choose the extractor kind for a URL.

        Raises:
            InvalidUrl: If the URL cannot be parsed
        """
        hostname = _hostname(url)
        if hostname is not None and hostname in self.social_hosts:
            return ExtractorKind.SOCIAL
        return ExtractorKind.OGP

    def is_social(self, url: str) -> bool:
        """Check if a URL belongs to a social platform host."""
        try:
            return self.route(url) is ExtractorKind.SOCIAL
        except InvalidUrl:
            return False


def route(url: str) -> ExtractorKind:
    """
    Choose the extractor kind for a URL using the default host set.

    This is a convenience function that creates a SourceRouter instance.
    """
    return SourceRouter().route(url)
