"""
ZIP photo fetcher implementation.

Reads photos from a ZIP archive on disk, decoding every image member.
"""

from collections.abc import Iterable
from pathlib import Path

from typing_extensions import override

from ..interfaces import PhotoFetcher
from ..logging_config import get_logger
from ..models import Photo
from .zip_extractor import ZipArchiveExtractor


class ZipPhotoFetcher(PhotoFetcher):
    """
    Photo fetcher backed by a ZIP archive.

    Photo ids are assigned in central directory order, starting at 0, and stay
    fixed for the life of the fetcher's cache.
    """

    def __init__(self, archive_path: Path, extractor: ZipArchiveExtractor | None = None):
        """
        Initialize ZIP photo fetcher.

        Args:
            archive_path: Path to the ZIP archive
            extractor: Extractor to decode with (default: single-threaded)
        """
        self.archive_path: Path = Path(archive_path)
        self.extractor: ZipArchiveExtractor = extractor or ZipArchiveExtractor()

        self.logger = get_logger("zip_fetcher")

        if not self.archive_path.exists():
            raise FileNotFoundError(f"Archive does not exist: {self.archive_path}")

        if self.archive_path.is_dir():
            raise IsADirectoryError(f"Path is a directory, not an archive: {self.archive_path}")

        self._cache = dict[int, Photo]()
        self._cache_loaded: bool = False

    def _load_photos(self) -> None:
        """Extract all images from the archive into cache."""
        if self._cache_loaded:
            return

        buffer = self.archive_path.read_bytes()
        images = self.extractor.extract(buffer)

        if not images:
            self.logger.warning(f"No usable images found in {self.archive_path}")

        for photo_id, image in enumerate(images):
            self._cache[photo_id] = Photo(photo_id=photo_id, payload=image)

        self._cache_loaded = True
        self.logger.info(f"Loaded {len(self._cache)} photos from {self.archive_path}")

    @override
    def list_photos(self) -> Iterable[Photo]:
        """Return all available photos."""
        self._load_photos()
        return self._cache.values()

    @override
    def get_photo(self, photo_id: int) -> Photo:
        """Get a specific photo by ID."""
        self._load_photos()

        if photo_id not in self._cache:
            raise KeyError(f"Photo not found: {photo_id}")

        return self._cache[photo_id]

    def get_photo_count(self) -> int:
        """Get total number of available photos."""
        self._load_photos()
        return len(self._cache)

    def clear_cache(self) -> None:
        """Clear the photo cache and force re-extraction on next access.

        Photos handed out earlier keep their state; the next load creates a
        fresh set with zeroed statistics.
        """
        self._cache.clear()
        self._cache_loaded = False

    def reload_photos(self) -> None:
        """Force re-extraction from the archive."""
        self.clear_cache()
        self._load_photos()
