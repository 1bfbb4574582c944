"""
Tests for ConvergenceEvaluator.

Focus on the stability predicate and the advisory metrics.
"""

import pytest

from conftest import make_photo
from photo_curator.convergence import ConvergenceEvaluator, score_gap_at_cutoff


def pool_of(*stats):
    """Photos from (score, comparisons) tuples."""
    return [make_photo(i, score=score, comparisons=count) for i, (score, count) in enumerate(stats)]


class TestStability:
    """Test the stability predicate."""

    def test_pool_smaller_than_target_is_stable(self):
        evaluator = ConvergenceEvaluator()
        photos = pool_of((0, 0), (0, 0))

        assert evaluator.is_stable(photos, target_size=3, min_comparisons=3, total_comparisons=0)
        assert evaluator.is_stable([], target_size=3, min_comparisons=3, total_comparisons=0)

    def test_all_photos_meeting_min_comparisons_is_stable(self):
        evaluator = ConvergenceEvaluator()
        photos = pool_of((1, 3), (1, 3), (0, 4), (0, 3))

        assert evaluator.is_stable(photos, target_size=2, min_comparisons=3, total_comparisons=7)

    def test_large_gap_at_cutoff_is_stable(self):
        """A gap of 1.5 between rank target and target+1 settles the selection."""
        evaluator = ConvergenceEvaluator()
        photos = pool_of((2, 2), (1, 1), (-0.5, 1), (-1, 0))

        assert evaluator.is_stable(photos, target_size=2, min_comparisons=3, total_comparisons=2)

    def test_small_gap_and_missing_comparisons_is_unstable(self):
        evaluator = ConvergenceEvaluator()
        photos = pool_of((1, 2), (1, 2), (0, 1), (0, 1))

        assert not evaluator.is_stable(photos, target_size=2, min_comparisons=3, total_comparisons=100)

    def test_pool_equal_to_target_has_no_gap(self):
        """With nothing outside the cut, only comparison counts decide."""
        evaluator = ConvergenceEvaluator()
        photos = pool_of((5, 1), (-5, 1))

        assert score_gap_at_cutoff(photos, target_size=2) == 0.0
        assert not evaluator.is_stable(photos, target_size=2, min_comparisons=3, total_comparisons=1)


class TestMetrics:
    """Test progress and precision."""

    def test_progress_blends_coverage_and_total(self):
        """Half the photos at threshold and a third of the judgments gives 30 + 13.3."""
        evaluator = ConvergenceEvaluator()
        photos = pool_of((2, 3), (1, 3), (-0.5, 1), (-1, 1))

        progress = evaluator.progress(photos, min_comparisons=3, total_comparisons=4)

        assert progress == pytest.approx(30.0 + 40.0 / 3)
        assert evaluator.progress_label(progress) == "Building preference map..."

    def test_progress_is_capped_at_100(self):
        evaluator = ConvergenceEvaluator()
        photos = pool_of((0, 9), (0, 9))

        assert evaluator.progress(photos, min_comparisons=3, total_comparisons=1000) == 100.0

    def test_progress_labels(self):
        evaluator = ConvergenceEvaluator()

        assert evaluator.progress_label(0) == "Establishing baseline comparisons..."
        assert evaluator.progress_label(59.9) == "Building preference map..."
        assert evaluator.progress_label(60) == "Refining distinctions..."
        assert evaluator.progress_label(85) == "Almost there, finalizing rankings..."

    def test_precision_blends_comparisons_and_gap(self):
        """Average of 2 comparisons (15) plus a 1.5 gap (26.25) floors to 41."""
        evaluator = ConvergenceEvaluator()
        photos = pool_of((2, 3), (1, 3), (-0.5, 1), (-1, 1))

        assert evaluator.precision(photos, target_size=2) == 41

    def test_precision_never_exceeds_95(self):
        evaluator = ConvergenceEvaluator()
        photos = pool_of((10, 20), (8, 20), (0, 20), (-3, 20))

        assert evaluator.precision(photos, target_size=2) == 95

    def test_empty_pool_metrics_are_zero(self):
        evaluator = ConvergenceEvaluator()

        assert evaluator.progress([], min_comparisons=3, total_comparisons=0) == 0.0
        assert evaluator.precision([], target_size=5) == 0

    def test_evaluate_is_idempotent(self):
        """Evaluating twice without changes should give identical reports."""
        evaluator = ConvergenceEvaluator()
        photos = pool_of((1, 2), (0.5, 2), (0, 1), (-1, 1))

        first = evaluator.evaluate(photos, target_size=2, min_comparisons=3, total_comparisons=3)
        second = evaluator.evaluate(photos, target_size=2, min_comparisons=3, total_comparisons=3)

        assert first == second
        assert [p.comparisons for p in photos] == [2, 2, 1, 1]


class TestLockedPhotos:
    """Test that pinned photos do not hold back convergence."""

    def test_locked_photo_below_threshold_does_not_block_stability(self):
        """A pinned photo cannot gain comparisons, so only unlocked photos must reach the threshold."""
        # Arrange
        evaluator = ConvergenceEvaluator()
        photos = pool_of((1, 1), (0.5, 3), (0, 3), (0, 3))

        # Act / Assert
        assert not evaluator.is_stable(photos, target_size=2, min_comparisons=3, total_comparisons=5)
        assert evaluator.is_stable(photos, target_size=2, min_comparisons=3, total_comparisons=5, locked_ids={0})

    def test_progress_coverage_ignores_locked_photos(self):
        evaluator = ConvergenceEvaluator()
        photos = pool_of((1, 1), (0.5, 3), (0, 3), (0, 3))

        progress = evaluator.progress(photos, min_comparisons=3, total_comparisons=12, locked_ids={0})

        assert progress == 100.0

    def test_all_locked_pool_counts_as_covered(self):
        evaluator = ConvergenceEvaluator()
        photos = pool_of((1, 0), (0, 0), (0, 0))

        assert evaluator.is_stable(photos, target_size=2, min_comparisons=3, total_comparisons=0, locked_ids={0, 1, 2})
        assert evaluator.progress(photos, min_comparisons=3, total_comparisons=0, locked_ids={0, 1, 2}) == 60.0
