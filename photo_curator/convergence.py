"""
Convergence evaluation for the ranking phase.

Decides when the top-N cut is settled enough to show results, and derives the
advisory progress and precision figures shown alongside it.
"""

import math
from collections.abc import Collection, Sequence

import numpy as np

from .models import Photo, StabilityReport

STABLE_SCORE_GAP = 1.5  # gap at the cutoff that settles the selection
TOTAL_COMPARISONS_FACTOR = 1.5  # "enough" judgments, as a multiple of pool size

PROGRESS_MIN_WEIGHT = 60.0
PROGRESS_TOTAL_WEIGHT = 40.0
PROGRESS_LABELS = (
    (30.0, "Establishing baseline comparisons..."),
    (60.0, "Building preference map..."),
    (85.0, "Refining distinctions..."),
)
PROGRESS_FINAL_LABEL = "Almost there, finalizing rankings..."

PRECISION_COMPARISON_WEIGHT = 60.0
PRECISION_COMPARISON_SCALE = 8.0
PRECISION_GAP_WEIGHT = 35.0
PRECISION_GAP_SCALE = 2.0
PRECISION_CAP = 95


def score_gap_at_cutoff(photos: Sequence[Photo], target_size: int) -> float:
    """
    Score difference between the last photo inside the cut and the first outside.

    Returns 0.0 when nothing lies outside the cut.
    """
    ranked = sorted(photos, key=lambda p: p.score, reverse=True)
    cutoff = min(target_size, len(ranked)) - 1
    if cutoff < 0 or cutoff >= len(ranked) - 1:
        return 0.0
    return ranked[cutoff].score - ranked[cutoff + 1].score


class ConvergenceEvaluator:
    """Pure stability predicate plus advisory metrics over the photo pool.

    Nothing here mutates photos, so repeated calls on an unchanged pool agree.
    """

    def is_stable(
        self,
        photos: Sequence[Photo],
        target_size: int,
        min_comparisons: int,
        total_comparisons: int,
        locked_ids: Collection[int] = frozenset(),
    ) -> bool:
        """True once further comparisons are unlikely to change the top-N materially.

        Locked photos can no longer gain comparisons, so only unlocked photos must
        reach min_comparisons.
        """
        pool_size = len(photos)
        if pool_size < target_size:
            return True

        counts = self._comparison_counts(_unlocked(photos, locked_ids))
        min_comparisons_met = bool(np.all(counts >= min_comparisons))
        has_good_gap = score_gap_at_cutoff(photos, target_size) >= STABLE_SCORE_GAP
        reasonable_total = total_comparisons >= pool_size * TOTAL_COMPARISONS_FACTOR

        return min_comparisons_met or has_good_gap or (reasonable_total and min_comparisons_met)

    def progress(
        self,
        photos: Sequence[Photo],
        min_comparisons: int,
        total_comparisons: int,
        locked_ids: Collection[int] = frozenset(),
    ) -> float:
        """Progress toward the next stable ranking, 0 to 100."""
        if not photos:
            return 0.0

        counts = self._comparison_counts(_unlocked(photos, locked_ids))
        met_fraction = np.count_nonzero(counts >= min_comparisons) / len(counts) if len(counts) else 1.0
        target_total = min_comparisons * len(photos)
        total_fraction = min(total_comparisons / target_total, 1.0)

        progress = met_fraction * PROGRESS_MIN_WEIGHT + total_fraction * PROGRESS_TOTAL_WEIGHT
        return float(min(progress, 100.0))

    def progress_label(self, progress: float) -> str:
        for threshold, label in PROGRESS_LABELS:
            if progress < threshold:
                return label
        return PROGRESS_FINAL_LABEL

    def precision(self, photos: Sequence[Photo], target_size: int) -> int:
        """
        Confidence in the current selection, 0 to 95.

        Blends average comparisons per photo with the score gap at the cutoff and
        never claims full certainty.
        """
        if not photos:
            return 0

        average = float(self._comparison_counts(photos).mean())
        comparison_factor = min(average / PRECISION_COMPARISON_SCALE, 1.0) * PRECISION_COMPARISON_WEIGHT
        gap = score_gap_at_cutoff(photos, target_size)
        gap_factor = min(gap / PRECISION_GAP_SCALE, 1.0) * PRECISION_GAP_WEIGHT

        return min(math.floor(comparison_factor + gap_factor), PRECISION_CAP)

    def evaluate(
        self,
        photos: Sequence[Photo],
        target_size: int,
        min_comparisons: int,
        total_comparisons: int,
        locked_ids: Collection[int] = frozenset(),
    ) -> StabilityReport:
        """Compute the stability verdict and metrics in one pass."""
        progress = self.progress(photos, min_comparisons, total_comparisons, locked_ids)
        return StabilityReport(
            stable=self.is_stable(photos, target_size, min_comparisons, total_comparisons, locked_ids),
            progress=progress,
            precision=self.precision(photos, target_size),
            progress_label=self.progress_label(progress),
            score_gap=score_gap_at_cutoff(photos, target_size),
        )

    @staticmethod
    def _comparison_counts(photos: Sequence[Photo]) -> np.ndarray:
        return np.fromiter((p.comparisons for p in photos), dtype=np.int64, count=len(photos))
