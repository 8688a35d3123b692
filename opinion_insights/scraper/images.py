"""
Cover image download for extracted articles.
"""

import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from ..config.logging import StructuredLogger, get_logger
from .fetcher import HTTPFetcher


class ImageDownloader:
    """Save cover images to a directory; failures are logged, never raised."""

    def __init__(
        self,
        save_dir: str,
        fetcher: Optional[HTTPFetcher] = None,
        file_prefix: str = "cover",
        logger: Optional[StructuredLogger] = None
    ):
        self.save_dir = Path(save_dir)
        self.fetcher = fetcher or HTTPFetcher(max_retries=1)
        self.file_prefix = file_prefix
        self.logger = logger or get_logger(__name__)

    def filename_for(self, image_url: str, index: int) -> str:
        """Build `<prefix>_<index>_<basename>` from the URL path, query dropped."""
        basename = os.path.basename(urlparse(image_url).path) or "image"
        return f"{self.file_prefix}_{index}_{basename}"

    def download(self, image_url: Optional[str], index: int) -> Optional[str]:
        """
        Download one image.

        Args:
            image_url: Image URL; None is skipped
            index: Article position, used to keep file names unique

        Returns:
            Path of the saved file, or None when nothing was saved
        """
        if not image_url:
            return None

        result = self.fetcher.fetch(image_url, binary=True)
        if not result.success or not result.body:
            self.logger.warning("Image download failed", url=image_url, error=result.error_message)
            return None

        try:
            self.save_dir.mkdir(parents=True, exist_ok=True)
            path = self.save_dir / self.filename_for(image_url, index)
            path.write_bytes(result.body)
        except OSError as e:
            self.logger.error("Could not save image", error=e, url=image_url)
            return None

        self.logger.info("Cover image saved", url=image_url, path=str(path), size_bytes=len(result.body))
        return str(path)

    def close(self) -> None:
        self.fetcher.close()
