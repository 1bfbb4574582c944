"""
Archive readers.

Provides the raw ZIP extractor and a PhotoFetcher implementation on top of it.

Available implementations:
- ZipArchiveExtractor: Decodes stored and deflate image members from ZIP bytes
- ZipPhotoFetcher: Loads photos from a ZIP archive on disk
"""

from .zip_extractor import ZipArchiveExtractor, extract_archive
from .zip_fetcher import ZipPhotoFetcher

__all__ = ["ZipArchiveExtractor", "ZipPhotoFetcher", "extract_archive"]
