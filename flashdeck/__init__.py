"""
flashdeck - flashcard decks with SM-2 style review scheduling.
"""

__version__ = "0.1.0"
