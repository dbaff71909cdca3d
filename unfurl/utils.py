"""
URL and text helpers shared by the unfurl pipeline.
"""
import hashlib
import os
import re
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from unfurl.errors import ResolveFailed

ALLOWED_SCHEMES = ('http', 'https', 'file')
REMOTE_SCHEMES = ('http', 'https')

_LINE_BREAKS = re.compile(r'\r\n|\r|\n')


def validate_url(candidate: str) -> bool:
    """
    Check whether a string is an acceptable URL to unfurl.

    Accepts http and https URLs with an authority, and file URLs with a path.

    Args:
        candidate: The string to check

    Returns:
        True if the URL can be unfurled
    """
    if not candidate or not candidate.strip():
        return False
    try:
        parsed = urlparse(candidate.strip())
    except ValueError:
        return False

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        return False
    if scheme in REMOTE_SCHEMES:
        try:
            return bool(parsed.netloc) and bool(parsed.hostname)
        except ValueError:
            return False
    return bool(parsed.path or parsed.netloc)


def is_remote_url(url: str) -> bool:
    """Determine if a URL is remote (http/https) or local."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in REMOTE_SCHEMES


def is_absolute_url(value: str) -> bool:
    """Whether a URL stands on its own, without a base to resolve against."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if not parsed.scheme:
        return False
    if parsed.scheme.lower() in REMOTE_SCHEMES:
        return bool(parsed.netloc)
    return True


def resolve_url(value: str, base: str) -> str:
    """
    Make a URL absolute.

    An already absolute value is returned unchanged; anything else is joined
    onto `base`.

    Raises:
        ResolveFailed: If the result is still not an absolute URL
    """
    value = value.strip()
    if not value:
        raise ResolveFailed(value, base)
    if is_absolute_url(value):
        return value
    try:
        resolved = urljoin(base, value)
    except ValueError as e:
        raise ResolveFailed(value, base) from e
    if not is_absolute_url(resolved):
        raise ResolveFailed(value, base)
    return resolved


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim a string, mapping empty results to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def split_lines(text: str) -> List[str]:
    """Split text on any line break style, keeping empty segments."""
    return _LINE_BREAKS.split(text)


def collapse_newlines(text: str) -> str:
    """Replace runs of line breaks with a single space."""
    return re.sub(r'[\r\n]+', ' ', text).strip()


def generate_unique_filename(url: str, default_ext: str = '.png') -> str:
    """Generate a unique filename based on the URL's SHA-256 hash."""
    hash_object = hashlib.sha256(url.encode())
    filename = hash_object.hexdigest()[:32]
    parsed = urlparse(url)
    file_ext = os.path.splitext(parsed.path)[1]
    if not file_ext:
        file_ext = default_ext
    return f"{filename}{file_ext}"
