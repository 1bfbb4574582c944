"""
Tests for PhotoPool and candidate pool selection.
"""

import pytest

from conftest import make_photo
from photo_curator.exceptions import ValidationError
from photo_curator.pool import PhotoPool, select_candidate_pool


class TestPhotoPool:
    """Test PhotoPool behavior through public interface."""

    def test_rejects_duplicate_ids(self):
        with pytest.raises(ValidationError, match="Duplicate"):
            PhotoPool([make_photo(1), make_photo(1)])

    def test_keeps_insertion_order(self):
        pool = PhotoPool([make_photo(5), make_photo(2), make_photo(9)])

        assert [p.photo_id for p in pool] == [5, 2, 9]
        assert len(pool) == 3
        assert 2 in pool
        assert 3 not in pool

    def test_lock_excludes_from_unlocked_only(self, photos):
        """Locked photos leave unlocked() but stay in the pool."""
        # Arrange
        pool = PhotoPool(photos(3))

        # Act
        pool.lock(1)

        # Assert
        assert [p.photo_id for p in pool.unlocked()] == [0, 2]
        assert [p.photo_id for p in pool.photos] == [0, 1, 2]
        assert pool.locked_ids == frozenset({1})

    def test_unlock_and_toggle(self, photos):
        pool = PhotoPool(photos(2))

        assert pool.toggle_lock(0) is True
        assert pool.is_locked(0)
        assert pool.toggle_lock(0) is False
        pool.lock(1)
        pool.unlock(1)
        pool.unlock(1)

        assert pool.locked_ids == frozenset()

    def test_lock_unknown_photo(self, photos):
        pool = PhotoPool(photos(2))

        with pytest.raises(KeyError):
            pool.lock(42)


class TestSelectCandidatePool:
    """Test the screening hand-off rule."""

    def test_skipped_screening_uses_everything(self, photos):
        all_photos = photos(6)

        assert select_candidate_pool(all_photos, None, target_size=2) == all_photos

    def test_enough_kept_photos_form_the_pool(self, photos):
        """Keeping at least twice the target should rank only kept photos, in original order."""
        # Arrange
        all_photos = photos(10)

        # Act
        pool = select_candidate_pool(all_photos, [8, 1, 4, 6], target_size=2)

        # Assert
        assert [p.photo_id for p in pool] == [1, 4, 6, 8]

    def test_too_few_kept_photos_fall_back_to_all(self, photos):
        """Keeping fewer than twice the target should rank everything."""
        all_photos = photos(10)

        pool = select_candidate_pool(all_photos, [1, 2, 3], target_size=2)

        assert pool == all_photos
