"""
Ranker implementations.

Provides implementations of the Ranker interface for turning judgments into
running scores.

Available implementations:
- WinLossRanker: Asymmetric win/loss points with opponent tracking
"""

from .win_loss_ranker import WinLossRanker

__all__ = ["WinLossRanker"]
