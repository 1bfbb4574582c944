"""
Core dataclasses for the photo curator.

Defines archive entries, decoded images, photos and judgment results with validation.
"""

import time
from dataclasses import dataclass, field

from .exceptions import InvalidJudgment, ValidationError


@dataclass(frozen=True)
class ArchiveEntry:
    """Central directory metadata for one archive member. Parse-time only."""

    name: str
    compression_method: int
    compressed_size: int
    uncompressed_size: int
    local_header_offset: int

    @property
    def is_directory(self) -> bool:
        return self.name.endswith("/")


@dataclass(frozen=True)
class ExtractedImage:
    """Decoded image bytes plus the media type inferred from the member name.

    Serves as the opaque display handle for a photo; the ranking engine never
    looks inside ``data``.
    """

    data: bytes = field(repr=False)
    media_type: str
    name: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(eq=False)
class Photo:
    """A rankable photo with its running preference statistics."""

    photo_id: int
    payload: ExtractedImage
    score: float = 0.0
    comparisons: int = 0
    opponents: set[int] = field(default_factory=set)

    def __post_init__(self) -> None:
        """Validate photo data."""
        if self.photo_id < 0:
            raise ValidationError(f"photo_id must be non-negative, got {self.photo_id}")
        if self.photo_id in self.opponents:
            raise ValidationError(f"photo {self.photo_id} cannot be its own opponent")

    @property
    def name(self) -> str:
        return self.payload.name


@dataclass
class PairwiseResult:
    """Outcome of one pairwise preference judgment."""

    winner_id: int
    loser_id: int
    judge_id: str = "unknown"
    rationale: str = ""
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate pairwise result data."""
        if self.winner_id == self.loser_id:
            raise InvalidJudgment(f"winner and loser must differ, got {self.winner_id} twice")


@dataclass(frozen=True)
class StabilityReport:
    """Convergence verdict plus advisory progress and precision metrics."""

    stable: bool
    progress: float
    precision: int
    progress_label: str
    score_gap: float = 0.0
