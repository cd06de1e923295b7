import re
from datetime import date
from typing import Any, Optional

from .config import DEFAULT_SPORT, SPORT_EMOJIS, SPORT_LIST, SPORTS_REFERENCE_URLS
from .exceptions import InvalidSportError

_TRAILING_DIGITS = re.compile(r"\d+$")


def is_valid_sport(value: Any) -> bool:
    """Check whether a value names a supported sport."""
    return value in SPORT_LIST


def get_valid_sport(value: Optional[str], fallback: str = DEFAULT_SPORT) -> str:
    """
    Validate a sport parameter.

    Args:
        value: Sport from a URL or request parameter
        fallback: Sport to use when the value is not supported

    Returns:
        The value if it is a supported sport, the fallback otherwise
    """
    if is_valid_sport(value):
        return value
    return fallback


def require_sport(value: Optional[str]) -> str:
    """Like get_valid_sport, but raises instead of falling back."""
    if not is_valid_sport(value):
        raise InvalidSportError(f"Unsupported sport: {value}")
    return value


def get_sport_emoji(sport: str) -> str:
    return SPORT_EMOJIS.get(sport, '')


def get_sports_reference_url(sport: str, path: str) -> str:
    """
    Build the Sports-Reference page URL for a player.

    Args:
        sport: The sport of the player
        path: Player path as stored with the round (e.g. "r/ruthba01")

    Returns:
        Absolute URL of the player page
    """
    base_url, extension = SPORTS_REFERENCE_URLS[require_sport(sport)]
    return f"{base_url}{path}{extension}"


def extract_round_number(round_id: Optional[str]) -> int:
    """
    Extract the puzzle number from a round id.

    The number is the trailing run of digits ("baseball#42" -> 42). Round ids
    without one count as round 1.
    """
    if not round_id:
        return 1
    match = _TRAILING_DIGITS.search(round_id)
    return int(match.group(0)) if match else 1


def get_current_date_string(today: Optional[date] = None) -> str:
    """Today's date as YYYY-MM-DD."""
    return (today or date.today()).isoformat()


def calculate_percentage(correct: int, total: int) -> float:
    """
    Calculate percentage with proper handling of edge cases.

    Args:
        correct: Number of correct items
        total: Total number of items

    Returns:
        Percentage as a float
    """
    if total == 0:
        return 0.0
    return (correct / total) * 100.0


def safe_int(value: Any, default: int = 0) -> int:
    """
    Safely convert a value to an integer.

    Args:
        value: Value to convert
        default: Default value if conversion fails

    Returns:
        Integer value
    """
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (ValueError, TypeError):
        return default
