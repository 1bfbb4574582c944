"""
Photo Curator - Pairwise Preference Photo Selection

Narrows a photo archive down to a curated top-N set: images are decoded straight
from ZIP bytes, then ranked through adaptive pairwise comparisons until the
selection is stable.
"""

from .models import ExtractedImage, Photo, PairwiseResult, StabilityReport
from .interfaces import PhotoFetcher, Judge, Ranker, Selector
from .archive import ZipArchiveExtractor, ZipPhotoFetcher, extract_archive
from .session import RankingSession
from .orchestrator import Orchestrator, RunConfig

__version__ = "0.1.0"
__all__ = [
    "ExtractedImage",
    "Photo",
    "PairwiseResult",
    "StabilityReport",
    "PhotoFetcher",
    "Judge",
    "Ranker",
    "Selector",
    "ZipArchiveExtractor",
    "ZipPhotoFetcher",
    "extract_archive",
    "RankingSession",
    "Orchestrator",
    "RunConfig",
]
