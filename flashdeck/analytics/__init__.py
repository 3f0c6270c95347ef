"""
Analytics package exports.
"""

from flashdeck.analytics.service import compute_deck_stats
from flashdeck.analytics.types import DeckStats

__all__ = [
    "compute_deck_stats",
    "DeckStats",
]
