"""
Ranking session: the engine's public surface.

One session owns one pool, its locked-id set and the judgment counters. Every
engine call goes through a session; there is no module-level state.
"""

from collections.abc import Iterable

from .convergence import ConvergenceEvaluator
from .exceptions import ConfigurationError, InvalidJudgment
from .interfaces import Ranker, Selector
from .logging_config import get_logger
from .models import Photo, StabilityReport
from .pair_selectors.least_compared_selector import LeastComparedSelector
from .pool import PhotoPool
from .rankers.win_loss_ranker import WinLossRanker
from .results import top_n

REFINE_INCREMENT = 2


class RankingSession:
    """
    Sequential pairwise ranking over a photo pool.

    At most one pair is pending at a time: next_pair() keeps returning the same
    pair until record_judgment() resolves it.
    """

    def __init__(
        self,
        photos: Iterable[Photo],
        target_size: int,
        min_comparisons: int,
        selector: Selector | None = None,
        ranker: Ranker | None = None,
        evaluator: ConvergenceEvaluator | None = None,
    ):
        """
        Initialize ranking session.

        Args:
            photos: Photos forming the pool, in pool order
            target_size: Number of photos the curation will keep
            min_comparisons: Comparisons each unlocked photo needs before the ranking counts as stable
            selector: Pair selection strategy (default: LeastComparedSelector)
            ranker: Score update rule (default: WinLossRanker)
            evaluator: Convergence evaluator (default: ConvergenceEvaluator)
        """
        if target_size < 1:
            raise ConfigurationError(f"target_size must be at least 1, got {target_size}")
        if min_comparisons < 1:
            raise ConfigurationError(f"min_comparisons must be at least 1, got {min_comparisons}")

        self.pool: PhotoPool = PhotoPool(photos)
        self.target_size: int = target_size
        self.min_comparisons: int = min_comparisons
        self.selector: Selector = selector or LeastComparedSelector()
        self.ranker: Ranker = ranker or WinLossRanker()
        self.evaluator: ConvergenceEvaluator = evaluator or ConvergenceEvaluator()

        self.total_comparisons: int = 0
        self.refinement_rounds: int = 0
        self._pending: tuple[int, int] | None = None

        self.logger = get_logger("ranking_session")
        self.logger.info(
            f"Ranking session started: {len(self.pool)} photos, target={target_size}, min_comparisons={min_comparisons}"
        )

    @property
    def pending_pair(self) -> tuple[int, int] | None:
        return self._pending

    def next_pair(self) -> tuple[int, int] | None:
        """
        Return the ids of the pair to judge next.

        Returns:
            (photo_a_id, photo_b_id), or None when no useful comparison remains
        """
        if self._pending is not None:
            return self._pending

        pair = self.selector.select_pair(self.pool, self.target_size)
        if pair is None:
            self.logger.info("No further comparisons possible")
            return None

        photo_a, photo_b = pair
        if photo_a.photo_id == photo_b.photo_id:
            # Treated like an exhausted pool rather than surfaced to the caller
            self.logger.error(f"Selector paired photo {photo_a.photo_id} with itself")
            return None

        self._pending = (photo_a.photo_id, photo_b.photo_id)
        return self._pending

    def record_judgment(self, winner_id: int, loser_id: int) -> None:
        """
        Record that winner_id was preferred over loser_id.

        Raises:
            InvalidJudgment: If the ids are equal, unknown, locked, or not the pending pair
        """
        if winner_id == loser_id:
            raise InvalidJudgment(f"Photo {winner_id} cannot be judged against itself")
        if winner_id not in self.pool or loser_id not in self.pool:
            raise InvalidJudgment(f"Unknown photo in judgment: {winner_id} vs {loser_id}")
        locked = [photo_id for photo_id in (winner_id, loser_id) if self.pool.is_locked(photo_id)]
        if locked:
            raise InvalidJudgment(f"Locked photo in judgment: {locked}")
        if self._pending is not None and {winner_id, loser_id} != set(self._pending):
            raise InvalidJudgment(
                f"Judgment {winner_id} vs {loser_id} does not match pending pair {self._pending}"
            )

        self.ranker.apply_judgment(self.pool.get(winner_id), self.pool.get(loser_id))
        self.total_comparisons += 1
        self._pending = None

    def check_stable(self) -> StabilityReport:
        """Evaluate convergence without changing any state."""
        return self.evaluator.evaluate(
            self.pool.photos,
            self.target_size,
            self.min_comparisons,
            self.total_comparisons,
            self.pool.locked_ids,
        )

    def refine(self) -> None:
        """Raise the per-photo comparison threshold. Scores and history are kept."""
        self.min_comparisons += REFINE_INCREMENT
        self.refinement_rounds += 1
        self.logger.info(
            f"Refinement round {self.refinement_rounds}: min_comparisons now {self.min_comparisons}"
        )

    def lock(self, photo_id: int) -> None:
        """Pin a photo: no more comparisons for it, but it stays in the results."""
        self.pool.lock(photo_id)
        self._drop_pending_with(photo_id)

    def unlock(self, photo_id: int) -> None:
        self.pool.unlock(photo_id)

    def toggle_lock(self, photo_id: int) -> bool:
        locked = self.pool.toggle_lock(photo_id)
        if locked:
            self._drop_pending_with(photo_id)
        return locked

    def is_locked(self, photo_id: int) -> bool:
        return self.pool.is_locked(photo_id)

    def finalize(self, n: int | None = None) -> list[int]:
        """Ids of the top n photos (default: target_size), best first."""
        count = self.target_size if n is None else n
        selected = top_n(self.pool.photos, count)
        self.logger.info(f"Finalized selection of {len(selected)} photos after {self.total_comparisons} comparisons")
        return [photo.photo_id for photo in selected]

    def _drop_pending_with(self, photo_id: int) -> None:
        if self._pending is not None and photo_id in self._pending:
            self.logger.debug(f"Discarding pending pair {self._pending}: photo {photo_id} was locked")
            self._pending = None
