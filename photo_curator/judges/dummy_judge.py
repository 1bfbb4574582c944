"""
Dummy judge implementation for testing.

Provides deterministic and random preferences for testing purposes.
"""

import random

from typing_extensions import override

from ..exceptions import ValidationError
from ..interfaces import Judge
from ..models import PairwiseResult, Photo


class DummyJudge(Judge):
    """
    Dummy judge for testing purposes.

    Deterministic mode always prefers the photo found earlier in the archive.
    """

    def __init__(self, mode: str = "deterministic", seed: int = 42):
        """
        Initialize dummy judge.

        Args:
            mode: "deterministic" or "random"
            seed: Random seed for reproducible results
        """
        if mode not in ("deterministic", "random"):
            raise ValidationError(f"Unknown mode: {mode}")
        self.mode = mode
        self.seed = seed
        self.judge_id = f"dummy_{mode}"
        self._rng = random.Random(seed)

    @override
    def evaluate_pair(self, photo_a: Photo, photo_b: Photo) -> PairwiseResult:
        """Evaluate a pair using dummy logic."""
        if self.mode == "deterministic":
            winner, loser = sorted((photo_a, photo_b), key=lambda p: p.photo_id)
        else:
            winner, loser = self._rng.sample([photo_a, photo_b], 2)

        return PairwiseResult(
            winner_id=winner.photo_id,
            loser_id=loser.photo_id,
            judge_id=self.judge_id,
            rationale=f"Dummy {self.mode} preference",
        )
