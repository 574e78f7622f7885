"""
Token counting functionality for xdir.

This module provides a heuristic token estimate for generated documents.
It is deliberately independent of any model's vocabulary: words are split
on whitespace, runs of ordinary characters count as one token and every
punctuation character counts as a token of its own.
"""

import unicodedata


def is_punctuation(char: str) -> bool:
    """Check if a character is in one of the Unicode punctuation categories (P*)."""
    return unicodedata.category(char).startswith('P')


class TokenCounter:
    """
    Handles token estimation for text content.

    The counter keeps a running total across calls so a single instance
    can be fed a whole document piece by piece.
    """

    def __init__(self):
        self._total = 0

    @property
    def total_tokens(self) -> int:
        """Total number of tokens counted since creation or the last reset."""
        return self._total

    def count(self, text: str) -> int:
        """
        Count tokens in the given text and add them to the running total.

        Args:
            text: The text to count tokens for.

        Returns:
            Number of tokens in this text.
        """
        tokens = 0
        for word in text.split():
            in_token = False
            for char in word:
                if is_punctuation(char):
                    tokens += 1
                    in_token = False
                elif not in_token:
                    tokens += 1
                    in_token = True

        self._total += tokens
        return tokens

    def reset(self) -> None:
        """Reset the running total."""
        self._total = 0
