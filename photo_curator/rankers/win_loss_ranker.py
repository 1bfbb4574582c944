"""
Win/loss ranker implementation.

A win is a strong signal, a loss a softer penalty that later wins can recover.
"""

from typing import TYPE_CHECKING

from typing_extensions import override

if TYPE_CHECKING:
    from loguru import Logger

from ..exceptions import InvalidJudgment
from ..interfaces import Ranker
from ..logging_config import get_logger
from ..models import Photo

WIN_REWARD = 1.0
LOSS_PENALTY = 0.5


class WinLossRanker(Ranker):
    """
    Point-based ranker.

    Winner gains WIN_REWARD, loser drops LOSS_PENALTY. Scores are unbounded in
    both directions. Both photos record each other as opponents, including on
    repeat comparisons, where the set insert is a no-op but the counter still
    advances.
    """

    def __init__(self, win_reward: float = WIN_REWARD, loss_penalty: float = LOSS_PENALTY):
        """
        Initialize win/loss ranker.

        Args:
            win_reward: Points added to the winner
            loss_penalty: Points subtracted from the loser
        """
        self.win_reward: float = win_reward
        self.loss_penalty: float = loss_penalty
        self.logger: Logger = get_logger("win_loss_ranker")

    @override
    def apply_judgment(self, winner: Photo, loser: Photo) -> None:
        """Apply one judgment to both photos in place."""
        if winner.photo_id == loser.photo_id:
            raise InvalidJudgment(f"Photo {winner.photo_id} cannot be judged against itself")

        old_winner, old_loser = winner.score, loser.score

        winner.score += self.win_reward
        loser.score -= self.loss_penalty

        winner.comparisons += 1
        loser.comparisons += 1

        winner.opponents.add(loser.photo_id)
        loser.opponents.add(winner.photo_id)

        self.logger.info(f"Score update: {winner.photo_id} beat {loser.photo_id}")
        self.logger.info(f"  {winner.photo_id}: {old_winner:.1f}->{winner.score:.1f} ({winner.comparisons} comparisons)")
        self.logger.info(f"  {loser.photo_id}: {old_loser:.1f}->{loser.score:.1f} ({loser.comparisons} comparisons)")
