"""
Exceptions raised by the unfurl pipeline.

Fatal errors (InvalidUrl, FetchFailed, ParseFailed) abort a request and
carry enough context for display. ResolveFailed is field-local: extractors
catch it and record the affected field as absent.
"""
from typing import Optional


class UnfurlError(Exception):
    """Base exception for unfurl errors."""
    pass


class InvalidUrl(UnfurlError):
    """Raised when a URL is rejected by validation or cannot be parsed."""

    def __init__(self, url: str, reason: str = "invalid URL"):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class FetchFailed(UnfurlError):
    """Raised when an HTTP request or browser navigation does not succeed."""

    def __init__(self, url: str, status: Optional[int] = None, body: str = ""):
        self.url = url
        self.status = status
        self.body = body
        if status is None:
            message = f"Failed to fetch {url}: {body or 'no response'}"
        else:
            message = f"Failed to fetch {url}: HTTP {status}"
            if body:
                message += f"\n{body[:500]}"
        super().__init__(message)


class ParseFailed(UnfurlError):
    """Raised when content cannot be turned into a usable document."""

    def __init__(self, url: Optional[str] = None, reason: str = "no usable document"):
        self.url = url
        self.reason = reason
        target = f" from {url}" if url else ""
        super().__init__(f"Failed to parse content{target}: {reason}")


class ResolveFailed(UnfurlError):
    """Raised when a relative URL cannot be resolved against its base."""

    def __init__(self, value: str, base: Optional[str] = None):
        self.value = value
        self.base = base
        super().__init__(f"Could not resolve {value!r} against {base!r}")
