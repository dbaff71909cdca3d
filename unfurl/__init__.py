"""
unfurl - URL previews as Markdown

Expands a URL into structured preview metadata (title, description, image,
site and author attribution) and renders it as Markdown lines.

Example Usage:
    >>> from unfurl import run_unfurl
    >>> run_unfurl("https://example.com/page")
    ['> [Hello](https://example.com/page)', 'https://example.com/img.png']
"""

__version__ = "0.3.0"

# Configuration
from unfurl.config import UnfurlConfig, init_config

# Errors
from unfurl.errors import UnfurlError, InvalidUrl, FetchFailed, ParseFailed, ResolveFailed

# Models
from unfurl.models import Metadata, OgpMetadata, SocialMetadata, metadata_from_dict

# Pipeline
from unfurl.router import ExtractorKind, SourceRouter, route
from unfurl.fetcher import Fetcher, FetchMode
from unfurl.formatter import format_metadata
from unfurl.pipeline import fetch_metadata, unfurl_url, unfurl_many, run_unfurl

# Utilities
from unfurl.utils import validate_url, resolve_url

__all__ = [
    # Config
    "UnfurlConfig",
    "init_config",
    # Errors
    "UnfurlError",
    "InvalidUrl",
    "FetchFailed",
    "ParseFailed",
    "ResolveFailed",
    # Models
    "Metadata",
    "OgpMetadata",
    "SocialMetadata",
    "metadata_from_dict",
    # Pipeline
    "ExtractorKind",
    "SourceRouter",
    "route",
    "Fetcher",
    "FetchMode",
    "format_metadata",
    "fetch_metadata",
    "unfurl_url",
    "unfurl_many",
    "run_unfurl",
    # Utilities
    "validate_url",
    "resolve_url",
]
