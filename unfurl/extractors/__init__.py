"""
unfurl extractors

One extractor per ExtractorKind:
1. OgpExtractor - Open Graph tags of ordinary pages
2. SocialExtractor - oEmbed-backed social posts
"""
from typing import Dict, Optional, Type

from unfurl.config import UnfurlConfig
from unfurl.fetcher import Fetcher
from unfurl.router import ExtractorKind

from .base import Extractor
from .ogp import OgpExtractor
from .social import SocialExtractor

EXTRACTORS: Dict[ExtractorKind, Type[Extractor]] = {
    ExtractorKind.OGP: OgpExtractor,
    ExtractorKind.SOCIAL: SocialExtractor,
}


def get_extractor(kind: ExtractorKind, fetcher: Fetcher,
                  config: Optional[UnfurlConfig] = None) -> Extractor:
    """Instantiate the extractor registered for a kind."""
    return EXTRACTORS[kind](fetcher, config)


__all__ = [
    'Extractor',
    'OgpExtractor',
    'SocialExtractor',
    'EXTRACTORS',
    'get_extractor',
]
