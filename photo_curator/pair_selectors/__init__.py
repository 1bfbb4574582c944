"""
Selector implementations.

Provides implementations of the Selector interface for choosing which pair of
photos to compare next.

Available implementations:
- LeastComparedSelector: Favors under-compared photos and similar scores
"""

from .least_compared_selector import LeastComparedSelector

__all__ = ["LeastComparedSelector"]
