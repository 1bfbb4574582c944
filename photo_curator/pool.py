"""
Photo pool for the ranking phase.

Holds the screened photos in their original order together with the set of
locked photo ids.
"""

from collections.abc import Iterable, Iterator, Sequence

from .exceptions import ValidationError
from .logging_config import get_logger
from .models import Photo

# Module-level logger
logger = get_logger("pool")


class PhotoPool:
    """
    Ordered collection of photos subject to ranking.

    Pool order is the order photos were added and is what ties fall back to
    when sorting by score.
    """

    def __init__(self, photos: Iterable[Photo]):
        self._photos: list[Photo] = []
        self._by_id = dict[int, Photo]()
        self._locked_ids: set[int] = set()

        for photo in photos:
            if photo.photo_id in self._by_id:
                raise ValidationError(f"Duplicate photo_id in pool: {photo.photo_id}")
            self._photos.append(photo)
            self._by_id[photo.photo_id] = photo

    def __len__(self) -> int:
        return len(self._photos)

    def __iter__(self) -> Iterator[Photo]:
        return iter(self._photos)

    def __contains__(self, photo_id: object) -> bool:
        return photo_id in self._by_id

    @property
    def photos(self) -> list[Photo]:
        """Photos in pool order."""
        return list(self._photos)

    @property
    def locked_ids(self) -> frozenset[int]:
        return frozenset(self._locked_ids)

    def get(self, photo_id: int) -> Photo:
        """Get a photo by ID."""
        if photo_id not in self._by_id:
            raise KeyError(f"Photo not in pool: {photo_id}")
        return self._by_id[photo_id]

    def is_locked(self, photo_id: int) -> bool:
        return photo_id in self._locked_ids

    def lock(self, photo_id: int) -> None:
        """Exclude a photo from further pairing. It stays eligible for results."""
        self.get(photo_id)
        self._locked_ids.add(photo_id)
        logger.debug(f"Locked photo {photo_id} ({len(self._locked_ids)} locked)")

    def unlock(self, photo_id: int) -> None:
        self.get(photo_id)
        self._locked_ids.discard(photo_id)
        logger.debug(f"Unlocked photo {photo_id} ({len(self._locked_ids)} locked)")

    def toggle_lock(self, photo_id: int) -> bool:
        """Flip the lock state of a photo and return the new state."""
        if self.is_locked(photo_id):
            self.unlock(photo_id)
            return False
        self.lock(photo_id)
        return True

    def unlocked(self) -> list[Photo]:
        """Photos available for pairing, in pool order."""
        return [photo for photo in self._photos if photo.photo_id not in self._locked_ids]


def select_candidate_pool(
    photos: Sequence[Photo], kept_ids: Iterable[int] | None, target_size: int
) -> list[Photo]:
    """
    Build the ranking pool from the outcome of coarse screening.

    When screening was skipped, or kept fewer than twice the target size, every
    photo is ranked; otherwise only the kept photos, in their original order.

    Args:
        photos: All extracted photos
        kept_ids: Ids accepted during screening, or None if screening was skipped
        target_size: Number of photos the curation will keep

    Returns:
        Photos forming the ranking pool
    """
    if kept_ids is None:
        logger.info(f"Screening skipped, ranking all {len(photos)} photos")
        return list(photos)

    kept = set(kept_ids)
    screened = [photo for photo in photos if photo.photo_id in kept]
    if len(screened) < target_size * 2:
        logger.info(
            f"Only {len(screened)} photos kept (need {target_size * 2}), ranking all {len(photos)} photos"
        )
        return list(photos)

    logger.info(f"Ranking {len(screened)} of {len(photos)} photos kept during screening")
    return screened
