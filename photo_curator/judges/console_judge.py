"""
Console judge implementation.

Asks a person at the terminal which of two photos they prefer.
"""

from collections.abc import Callable

from typing_extensions import override

from ..exceptions import JudgeError, JudgingStopped
from ..interfaces import Judge
from ..logging_config import get_logger
from ..models import PairwiseResult, Photo

MAX_ATTEMPTS = 5

CHOICES_A = {"a", "1", "left"}
CHOICES_B = {"b", "2", "right"}
CHOICES_QUIT = {"q", "quit", "done"}


class ConsoleJudge(Judge):
    """
    Interactive judge reading preferences from standard input.

    Answers: "a" or "b" to prefer a photo, "q" to stop comparing and see results.
    """

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        """
        Initialize console judge.

        Args:
            input_fn: Prompt function returning the user's answer
            output_fn: Function used to show the pair
        """
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.judge_id = "console"
        self.logger = get_logger("console_judge")

    @override
    def evaluate_pair(self, photo_a: Photo, photo_b: Photo) -> PairwiseResult:
        """Show both photos and wait for a preference."""
        self.output_fn("")
        self.output_fn(f"  [a] {photo_a.name} ({photo_a.payload.media_type}, {photo_a.payload.size} bytes)")
        self.output_fn(f"  [b] {photo_b.name} ({photo_b.payload.media_type}, {photo_b.payload.size} bytes)")

        for _ in range(MAX_ATTEMPTS):
            try:
                answer = self.input_fn("Which do you prefer? [a/b, q to finish] ").strip().lower()
            except EOFError as e:
                raise JudgingStopped("input closed") from e

            if answer in CHOICES_A:
                return self._result(photo_a, photo_b)
            if answer in CHOICES_B:
                return self._result(photo_b, photo_a)
            if answer in CHOICES_QUIT:
                raise JudgingStopped("user finished comparing")

            self.output_fn(f"Unrecognised answer: {answer!r}")

        raise JudgeError(f"No valid answer after {MAX_ATTEMPTS} attempts")

    def _result(self, winner: Photo, loser: Photo) -> PairwiseResult:
        self.logger.debug(f"User preferred {winner.name} over {loser.name}")
        return PairwiseResult(
            winner_id=winner.photo_id,
            loser_id=loser.photo_id,
            judge_id=self.judge_id,
            rationale="user preference",
        )
