"""
Final result ordering.
"""

from collections.abc import Sequence

from .models import Photo


def rank_photos(photos: Sequence[Photo]) -> list[Photo]:
    """All photos by descending score. Equal scores keep their pool order."""
    # sorted() is stable, so ties keep input order
    return sorted(photos, key=lambda p: p.score, reverse=True)


def top_n(photos: Sequence[Photo], n: int) -> list[Photo]:
    """The n best photos (or all of them, if fewer), best first. Never raises."""
    if n <= 0:
        return []
    return rank_photos(photos)[:n]
