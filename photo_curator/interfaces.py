"""
Abstract base classes defining the interfaces for the photo curator.

All interfaces are synchronous; the ranking engine never blocks or suspends.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .models import PairwiseResult, Photo

if TYPE_CHECKING:
    from .pool import PhotoPool


class PhotoFetcher(ABC):
    """Interface for loading photos to be curated."""

    @abstractmethod
    def list_photos(self) -> Iterable[Photo]:
        """Return all available photos in discovery order."""
        pass

    @abstractmethod
    def get_photo(self, photo_id: int) -> Photo:
        """Get a specific photo by ID."""
        pass


class Judge(ABC):
    """Interface for capturing a preference between two photos."""

    @abstractmethod
    def evaluate_pair(self, photo_a: Photo, photo_b: Photo) -> PairwiseResult:
        """
        Decide which of two photos is preferred.

        May block (for example while waiting on a human).

        Args:
            photo_a: First photo shown
            photo_b: Second photo shown

        Returns:
            PairwiseResult naming the winner and the loser

        Raises:
            JudgeError: If no verdict can be produced
        """
        pass


class Ranker(ABC):
    """Interface for applying a judgment to the running score model."""

    @abstractmethod
    def apply_judgment(self, winner: Photo, loser: Photo) -> None:
        """
        Update scores, comparison counts and opponent sets in place.

        Raises:
            InvalidJudgment: If winner and loser are the same photo
        """
        pass


class Selector(ABC):
    """Interface for choosing the next pair of photos to compare."""

    @abstractmethod
    def select_pair(self, pool: "PhotoPool", target_size: int) -> tuple[Photo, Photo] | None:
        """
        Select the next pair to compare.

        Args:
            pool: Photo pool, including its locked-id set
            target_size: Number of photos the curation will keep

        Returns:
            Two distinct unlocked photos, or None if no useful comparison remains
        """
        pass
