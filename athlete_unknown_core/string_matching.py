"""
String matching for name guesses.

Guesses and answers are compared after normalization; near misses are
measured with the Levenshtein edit distance.
"""

import re
from typing import List

from .exceptions import InputValidationError

_WHITESPACE = re.compile(r"\s+")
_IGNORED_CHARACTERS = str.maketrans('', '', "'’-.")


def normalize(text: str = '') -> str:
    """
    Normalize a name for comparison.

    Lowercases the text and removes whitespace, apostrophes, hyphens and
    periods. Applying it twice gives the same result as applying it once.

    Args:
        text: Raw text, may be None

    Returns:
        Normalized text
    """
    if not text:
        return ''
    return _WHITESPACE.sub('', text.lower()).translate(_IGNORED_CHARACTERS)


def levenshtein_distance(a: str, b: str) -> int:
    """
    Calculate the edit distance between two strings.

    Uses the full (len(a)+1) x (len(b)+1) dynamic-programming table.

    Args:
        a: First string
        b: Second string

    Returns:
        Minimum number of single-character insertions, deletions and
        substitutions turning a into b
    """
    dp: List[List[int]] = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]

    for i in range(len(a) + 1):
        dp[i][0] = i
    for j in range(len(b) + 1):
        dp[0][j] = j

    for i in range(1, len(a) + 1):
        for j in range(1, len(b) + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1]
            else:
                dp[i][j] = 1 + min(dp[i - 1][j - 1], dp[i - 1][j], dp[i][j - 1])

    return dp[len(a)][len(b)]


def validate_guess(raw_guess: str) -> str:
    """
    Normalize a raw guess, rejecting guesses with nothing left to compare.

    Args:
        raw_guess: The guess as typed by the player

    Returns:
        The normalized guess

    Raises:
        InputValidationError: If the guess normalizes to an empty string
    """
    normalized = normalize(raw_guess)
    if not normalized:
        raise InputValidationError("Guess is empty")
    return normalized
