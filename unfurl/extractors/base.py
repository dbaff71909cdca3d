"""
Base class for metadata extractors.

An extractor turns a URL into one normalized metadata record. Each concrete
extractor handles one ExtractorKind chosen by the router.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from unfurl.config import UnfurlConfig
from unfurl.fetcher import Fetcher
from unfurl.models import Metadata
from unfurl.router import ExtractorKind

logger = logging.getLogger(__name__)


class Extractor(ABC):
    """
    Abstract base class for extractors.

    Subclasses set `kind` and implement `unfurl()`.

    Args:
        fetcher: Open Fetcher used for all network access
        config: Settings (defaults to the fetcher's configuration)
    """

    kind: ExtractorKind

    def __init__(self, fetcher: Fetcher, config: Optional[UnfurlConfig] = None):
        self.fetcher = fetcher
        self.config = config or fetcher.config

    @abstractmethod
    async def unfurl(self, url: str) -> Metadata:
        """
        Fetch and extract metadata for a URL.

        Raises:
            FetchFailed: If the remote content cannot be retrieved
            ParseFailed: If the content cannot be parsed
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} kind={self.kind.value}>"
