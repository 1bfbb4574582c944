"""
Tests for LeastComparedSelector implementation.

Focus on candidate ordering, judged-pair avoidance and the fallback paths.
"""

from conftest import make_photo
from photo_curator.pair_selectors.least_compared_selector import LeastComparedSelector
from photo_curator.pool import PhotoPool
from photo_curator.rankers.win_loss_ranker import WinLossRanker


def ids(pair):
    return tuple(photo.photo_id for photo in pair)


class TestLeastComparedSelector:
    """Test LeastComparedSelector behavior through public interface."""

    def test_returns_none_for_fewer_than_two_photos(self):
        """Pools with zero or one photo should yield no pair."""
        selector = LeastComparedSelector()

        assert selector.select_pair(PhotoPool([]), target_size=5) is None
        assert selector.select_pair(PhotoPool([make_photo(0)]), target_size=5) is None

    def test_returns_none_when_fewer_than_two_unlocked(self, photos):
        """Locking all but one photo should exhaust pairing."""
        # Arrange
        pool = PhotoPool(photos(4))
        for photo_id in (0, 1, 2):
            pool.lock(photo_id)

        # Act
        pair = LeastComparedSelector().select_pair(pool, target_size=5)

        # Assert
        assert pair is None

    def test_prefers_least_compared_photos(self):
        """Photos with fewer comparisons should be paired first."""
        # Arrange
        pool = PhotoPool([
            make_photo(0, comparisons=3),
            make_photo(1, comparisons=0),
            make_photo(2, comparisons=2),
            make_photo(3, comparisons=0),
        ])

        # Act
        pair = LeastComparedSelector().select_pair(pool, target_size=5)

        # Assert
        assert ids(pair) == (1, 3)

    def test_breaks_comparison_ties_by_higher_score(self):
        """Among equally compared photos, higher scores come first."""
        # Arrange
        pool = PhotoPool([
            make_photo(0, score=-0.5, comparisons=1),
            make_photo(1, score=1.0, comparisons=1),
            make_photo(2, score=0.5, comparisons=1),
        ])

        # Act
        pair = LeastComparedSelector().select_pair(pool, target_size=5)

        # Assert
        assert ids(pair) == (1, 2)

    def test_skips_already_judged_pairs(self, photos):
        """A pair that was already judged should not be offered while others remain."""
        # Arrange
        pool_photos = photos(3)
        WinLossRanker().apply_judgment(pool_photos[0], pool_photos[1])
        pool_photos[2].comparisons = 1  # level the counts so ordering is by score
        pool = PhotoPool(pool_photos)

        # Act
        pair = LeastComparedSelector().select_pair(pool, target_size=5)

        # Assert
        assert set(ids(pair)) != {0, 1}
        assert ids(pair) == (0, 2)

    def test_falls_back_to_recomparison_when_all_pairs_judged(self, photos):
        """Once every pair is judged, the top candidates should be compared again."""
        # Arrange
        pool_photos = photos(3)
        ranker = WinLossRanker()
        ranker.apply_judgment(pool_photos[0], pool_photos[1])
        ranker.apply_judgment(pool_photos[0], pool_photos[2])
        ranker.apply_judgment(pool_photos[1], pool_photos[2])
        pool = PhotoPool(pool_photos)

        # Act
        pair = LeastComparedSelector().select_pair(pool, target_size=5)

        # Assert
        # All have 2 comparisons; scores 2.0, 0.5, -1.0
        assert ids(pair) == (0, 1)

    def test_never_pairs_locked_photos(self, photos):
        """Locked photos should never be selected."""
        # Arrange
        pool = PhotoPool(photos(5))
        pool.lock(2)
        selector = LeastComparedSelector()
        ranker = WinLossRanker()

        # Act / Assert
        for _ in range(25):
            pair = selector.select_pair(pool, target_size=5)
            assert pair is not None
            assert 2 not in ids(pair)
            assert pair[0].photo_id != pair[1].photo_id
            ranker.apply_judgment(*pair)

    def test_selection_does_not_mutate_pool(self, photos):
        """Selecting a pair should leave every photo untouched."""
        # Arrange
        pool = PhotoPool(photos(4))
        before = [(p.score, p.comparisons, set(p.opponents)) for p in pool]

        # Act
        first = LeastComparedSelector().select_pair(pool, target_size=5)
        second = LeastComparedSelector().select_pair(pool, target_size=5)

        # Assert
        assert [(p.score, p.comparisons, set(p.opponents)) for p in pool] == before
        assert ids(first) == ids(second)
