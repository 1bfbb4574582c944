"""
Least-compared pair selector implementation.

Gives under-compared photos attention first, then pairs photos of similar
strength, never repeating a pair while an unjudged one remains.
"""

from typing_extensions import override

from ..interfaces import Selector
from ..logging_config import get_logger
from ..models import Photo
from ..pool import PhotoPool

# Module-level logger
logger = get_logger("least_compared_selector")


class LeastComparedSelector(Selector):
    """Selector that prioritizes photos with fewer comparisons and close scores.

    Deterministic for a given pool state and never mutates it.
    """

    @override
    def select_pair(self, pool: PhotoPool, target_size: int) -> tuple[Photo, Photo] | None:
        """Return the next pair to compare, or None if no useful comparison remains."""
        unlocked = pool.unlocked()
        if len(unlocked) < 2:
            logger.debug(f"Insufficient unlocked photos for a pair ({len(unlocked)} available)")
            return None

        candidates = self._order_candidates(unlocked)

        pair = self._first_unjudged_pair(candidates)
        if pair is not None:
            logger.debug(f"Selected unjudged pair: {pair[0].photo_id} vs {pair[1].photo_id}")
            return pair

        # Every pair has been judged, so repeat a comparison near the top
        top = candidates[:target_size * 2]
        if len(top) >= 2:
            first = top[0]
            opponent = next((p for p in top[1:] if p.photo_id != first.photo_id), None)
            if opponent is not None:
                logger.debug(f"All pairs judged, re-comparing {first.photo_id} vs {opponent.photo_id}")
                return first, opponent

        if candidates[0].photo_id != candidates[1].photo_id:
            return candidates[0], candidates[1]

        logger.error("Cannot find two different unlocked photos to compare")
        return None

    def _order_candidates(self, photos: list[Photo]) -> list[Photo]:
        """Sort by comparisons ascending, then score descending; stable for ties."""
        return sorted(photos, key=lambda p: (p.comparisons, -p.score))

    def _first_unjudged_pair(self, candidates: list[Photo]) -> tuple[Photo, Photo] | None:
        for i, photo_a in enumerate(candidates):
            for photo_b in candidates[i + 1:]:
                if photo_a.photo_id == photo_b.photo_id:
                    continue
                if photo_b.photo_id in photo_a.opponents:
                    continue
                return photo_a, photo_b
        return None
