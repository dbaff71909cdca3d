"""
Preview image download.

When enabled, the preview image of an unfurled URL (og:image or the post's
photo) is saved locally and referenced through a Markdown template line.
"""
import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

from unfurl.config import UnfurlConfig
from unfurl.fetcher import Fetcher
from unfurl.models import Metadata, OgpMetadata, SocialMetadata
from unfurl.utils import generate_unique_filename, is_remote_url

logger = logging.getLogger(__name__)

FILE_PATH_PLACEHOLDER = "$FILE_PATH"


def preview_image_url(data: Metadata) -> Optional[str]:
    """Return the image a record previews with, if it has one."""
    if isinstance(data, OgpMetadata):
        return data.image_url
    if isinstance(data, SocialMetadata):
        return data.photo_url
    return None


async def download_image(url: str, fetcher: Fetcher, image_dir: str) -> Path:
    """
    Download an image into `image_dir`.

    Returns:
        Path of the saved file

    Raises:
        ValueError: If the URL is not remote
        FetchFailed: If the download fails
    """
    if not is_remote_url(url):
        raise ValueError(f"Invalid remote image URL: {url}")

    content = await fetcher.fetch_bytes(url)
    directory = Path(image_dir)
    directory.mkdir(parents=True, exist_ok=True)
    filepath = directory / generate_unique_filename(url)
    await asyncio.to_thread(filepath.write_bytes, content)
    logger.debug(f"Downloaded image: {url} -> {filepath}")
    return filepath


def render_image_line(path: Path, config: UnfurlConfig) -> str:
    """Fill the image template with the saved file's path."""
    if config.use_absolute_path:
        file_path = str(path.resolve())
    else:
        file_path = os.path.relpath(path, Path.cwd())
    return config.image_template.replace(FILE_PATH_PLACEHOLDER, Path(file_path).as_posix())


async def image_lines(data: Metadata, fetcher: Fetcher, config: UnfurlConfig) -> list:
    """
    Download the preview image of a record and return its template line.

    Failures are logged and yield no lines.
    """
    url = preview_image_url(data)
    if not url:
        return []
    try:
        path = await download_image(url, fetcher, config.image_dir)
    except Exception as e:
        logger.warning(f"Failed to download image {url}: {e}")
        return []
    return [render_image_line(path, config)]
