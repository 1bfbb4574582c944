"""
Simulated judge implementation.

Picks the preferred photo from latent quality scores with a noise parameter, for testing.
"""

import random

from typing_extensions import override

from ..interfaces import Judge
from ..models import PairwiseResult, Photo


class SimulatedJudge(Judge):
    """
    Simulated judge for testing purposes.

    Compares ground truth quality scores with added noise.
    """

    def __init__(self, ground_truth: dict[int, float], noise: float = 0.1, seed: int | None = None):
        """
        Initialize simulated judge.

        Args:
            ground_truth: Dict mapping photo_id to true quality score
            noise: Amount of noise to add (0-1, where 1 = full noise)
            seed: Optional seed for reproducible noise
        """
        self.ground_truth = ground_truth
        self.noise = max(0.0, min(1.0, noise))  # Clamp to [0, 1]
        self.judge_id = "simulated"
        self._rng = random.Random(seed)

    def _add_noise(self, score: float) -> float:
        """Add Gaussian noise to score."""
        if self.noise == 0:
            return score

        # Scale noise by score magnitude
        noise_scale = abs(score) * self.noise
        return score + self._rng.gauss(0, noise_scale)

    @override
    def evaluate_pair(self, photo_a: Photo, photo_b: Photo) -> PairwiseResult:
        """Prefer the photo with the higher noisy score; photo_a wins ties."""
        true_a = self.ground_truth.get(photo_a.photo_id, 0.0)
        true_b = self.ground_truth.get(photo_b.photo_id, 0.0)
        noisy_a = self._add_noise(true_a)
        noisy_b = self._add_noise(true_b)

        winner, loser = (photo_a, photo_b) if noisy_a >= noisy_b else (photo_b, photo_a)
        rationale = (
            f"Simulated evaluation: {photo_a.photo_id}={noisy_a:.3f} (true {true_a:.3f}), "
            f"{photo_b.photo_id}={noisy_b:.3f} (true {true_b:.3f})"
        )

        return PairwiseResult(
            winner_id=winner.photo_id,
            loser_id=loser.photo_id,
            judge_id=self.judge_id,
            rationale=rationale,
        )

    def get_ground_truth(self) -> dict[int, float]:
        """Get ground truth scores for debugging."""
        return self.ground_truth.copy()

    def set_noise(self, noise: float) -> None:
        """Update noise level."""
        self.noise = max(0.0, min(1.0, noise))
