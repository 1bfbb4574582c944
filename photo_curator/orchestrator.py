"""
Orchestrator for photo curation.

Coordinates fetcher, judge, ranker and selector around a ranking session.
Judgments are strictly sequential: the next pair is only revealed once the
current one is resolved.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loguru import Logger

from .exceptions import ConfigurationError, InvalidJudgment, JudgeError, JudgingStopped
from .interfaces import Judge, PhotoFetcher, Ranker, Selector
from .logging_config import get_logger
from .models import Photo, StabilityReport
from .pool import select_candidate_pool
from .session import RankingSession

# Constants for failure threshold logic
EARLY_ABORT_THRESHOLD = 4      # Abort if 100% of first 4 judgments fail
LATE_ABORT_THRESHOLD = 50     # Only check failure rate after 50+ judgments
FAILURE_RATE_LIMIT = 0.2      # Abort if >20% failure rate after threshold

MIN_TARGET_SIZE = 5
MAX_TARGET_SIZE = 100


@dataclass
class RunConfig:
    """Configuration for a curation run."""

    target_selection_size: int = 20  # photos to keep, validate 5 ≤ size ≤ 100
    min_comparisons: int = 3  # per-photo comparisons before the ranking is stable
    budget: int = 500  # total judgments allowed
    refine_rounds: int = 0  # extra refinement rounds after the first stable verdict
    progress_every: int = 10  # print progress every N judgments

    def __post_init__(self):
        """Validate configuration."""
        if not (MIN_TARGET_SIZE <= self.target_selection_size <= MAX_TARGET_SIZE):
            raise ConfigurationError(
                f"target_selection_size must be between {MIN_TARGET_SIZE} and {MAX_TARGET_SIZE}, got {self.target_selection_size}"
            )
        if self.min_comparisons < 1:
            raise ConfigurationError(f"min_comparisons must be at least 1, got {self.min_comparisons}")
        if self.budget <= 0:
            raise ConfigurationError(f"budget must be positive, got {self.budget}")
        if self.refine_rounds < 0:
            raise ConfigurationError(f"refine_rounds must be non-negative, got {self.refine_rounds}")
        if self.progress_every <= 0:
            raise ConfigurationError(f"progress_every must be positive, got {self.progress_every}")


class Orchestrator:
    """Main orchestrator for photo curation."""

    def __init__(
        self,
        fetcher: PhotoFetcher,
        judge: Judge,
        config: RunConfig,
        ranker: Ranker | None = None,
        selector: Selector | None = None,
        kept_ids: Iterable[int] | None = None,
        locked_ids: Iterable[int] | None = None,
    ):
        """
        Initialize orchestrator with all components.

        Args:
            fetcher: Source of extracted photos
            judge: Captures one preference per pair
            config: Run configuration
            ranker: Score update rule (default: session default)
            selector: Pair selection strategy (default: session default)
            kept_ids: Photo ids accepted during screening, None if screening was skipped
            locked_ids: Photo ids pinned once the ranking first stabilises; refinement never pairs them
        """
        self.fetcher: PhotoFetcher = fetcher
        self.judge: Judge = judge
        self.config: RunConfig = config
        self.ranker: Ranker | None = ranker
        self.selector: Selector | None = selector
        self.kept_ids: set[int] | None = None if kept_ids is None else set(kept_ids)
        self.locked_ids: set[int] = set(locked_ids or ())
        self._locks_applied: bool = False

        self.session: RankingSession | None = None

        # Exception tolerance tracking
        self.total_judgments: int = 0  # Total attempted (including failures)
        self.failed_judgments: int = 0
        self.failure_log = list[tuple[tuple[int, int], str, str]]()  # (pair, exception_type, exception_msg)

        self.logger: Logger = get_logger("orchestrator")

    def run(self) -> list[Photo]:
        """Run the comparison loop until stable (after any refine rounds) and return the selection."""
        self.logger.info(f"Starting photo curation with config: {self.config}")
        print(f"Starting photo curation with config: {self.config}")

        photos = list(self.fetcher.list_photos())
        pool = select_candidate_pool(photos, self.kept_ids, self.config.target_selection_size)
        self.session = RankingSession(
            pool,
            target_size=self.config.target_selection_size,
            min_comparisons=self.config.min_comparisons,
            selector=self.selector,
            ranker=self.ranker,
        )
        session = self.session

        while session.total_comparisons < self.config.budget:
            report = session.check_stable()
            if report.stable:
                # Pinning happens on the first stable ranking, so refinement skips pinned photos
                self._apply_locks(session)
                if session.refinement_rounds >= self.config.refine_rounds:
                    self.logger.info(f"Ranking stable after {session.total_comparisons} comparisons")
                    break
                session.refine()
                continue

            pair = session.next_pair()
            if pair is None:
                self.logger.info("Selector returned no more pairs")
                break

            if not self._judge_pair(session, pair):
                break

        self._apply_locks(session)
        report = session.check_stable()
        self._print_progress(report)

        selected_ids = session.finalize()
        self.logger.info(f"Curation complete: {session.total_comparisons} comparisons, {len(selected_ids)} photos selected")
        print(f"Curation complete: {session.total_comparisons} comparisons, {len(selected_ids)} photos selected")
        return [session.pool.get(photo_id) for photo_id in selected_ids]

    def _apply_locks(self, session: RankingSession) -> None:
        """Pin the requested photos. Only the first call has any effect."""
        if self._locks_applied:
            return
        self._locks_applied = True

        for photo_id in sorted(self.locked_ids):
            if photo_id not in session.pool:
                self.logger.warning(f"Cannot lock photo {photo_id}: not in the ranking pool")
                continue
            session.lock(photo_id)
        if session.pool.locked_ids:
            self.logger.info(f"Locked {len(session.pool.locked_ids)} photos: {sorted(session.pool.locked_ids)}")

    def _judge_pair(self, session: RankingSession, pair: tuple[int, int]) -> bool:
        """
        Ask the judge about one pair and record the verdict.

        Returns:
            False if the loop should stop and finalize, True otherwise
        """
        photo_a, photo_b = session.pool.get(pair[0]), session.pool.get(pair[1])
        self.total_judgments += 1

        try:
            result = self.judge.evaluate_pair(photo_a, photo_b)
        except JudgingStopped as e:
            self.logger.info(f"Judge stopped at pair {pair}: {e}")
            return False
        except JudgeError as e:
            self.logger.error(f"Judgment failed for pair {pair}: {e}")
            self.failed_judgments += 1
            self.failure_log.append((pair, type(e).__name__, str(e)))
            self._check_failure_rate()
            return True

        try:
            session.record_judgment(result.winner_id, result.loser_id)
        except InvalidJudgment as e:
            # Precondition violations end the comparison phase rather than the run
            self.logger.error(f"Invalid judgment for pair {pair}: {e}; finalizing")
            return False

        self.logger.debug(f"Recorded judgment {session.total_comparisons}: {result.winner_id} over {result.loser_id}")
        if session.total_comparisons % self.config.progress_every == 0:
            self._print_progress(session.check_stable())
        return True

    def _check_failure_rate(self) -> None:
        """Abort if judge failures exceed the early or late thresholds."""
        if self.total_judgments >= EARLY_ABORT_THRESHOLD and self.failed_judgments == self.total_judgments:
            raise RuntimeError(f"100% failure rate in first {EARLY_ABORT_THRESHOLD} judgments - aborting")

        if self.total_judgments >= LATE_ABORT_THRESHOLD:
            failure_rate = self.failed_judgments / self.total_judgments
            if failure_rate > FAILURE_RATE_LIMIT:
                raise RuntimeError(f"Failure rate {failure_rate:.1%} exceeds {FAILURE_RATE_LIMIT:.0%} threshold - aborting")

    def _print_progress(self, report: StabilityReport) -> None:
        """Print progress and precision."""
        assert self.session is not None
        comparisons = self.session.total_comparisons
        self.logger.info(
            f"Progress: {report.progress:.0f}% ({report.progress_label}), precision {report.precision}%, {comparisons} comparisons"
        )
        print(f"Progress: {report.progress:.0f}% - {report.progress_label} Precision: {report.precision}% ({comparisons} comparisons)")
