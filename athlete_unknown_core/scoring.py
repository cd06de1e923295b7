"""
Scoring rules: score deltas, rank evaluation and hint generation.

All functions are pure; the constants they read come from a GameConfig.
"""

from typing import Optional

from .config import DEFAULT_CONFIG, GameConfig

# Score actions
ACTION_INCORRECT_GUESS = 'incorrectGuess'
ACTION_REGULAR_TILE = 'regularTile'
ACTION_PHOTO_TILE = 'photoTile'


def calculate_new_score(current_score: int, action: str, config: Optional[GameConfig] = None) -> int:
    """
    Calculate the score after an action.

    There is no floor: scores below zero are kept as they are.

    Args:
        current_score: Score before the action
        action: One of the ACTION_* constants
        config: Game rules, defaults to the production rules

    Returns:
        The new score; unknown actions leave the score unchanged
    """
    config = config or DEFAULT_CONFIG
    if action == ACTION_INCORRECT_GUESS:
        return current_score - config.incorrect_guess_penalty
    if action == ACTION_REGULAR_TILE:
        return current_score - config.regular_tile_penalty
    if action == ACTION_PHOTO_TILE:
        return current_score - config.photo_tile_penalty
    return current_score


def tile_action(tile_name: str, config: Optional[GameConfig] = None) -> str:
    config = config or DEFAULT_CONFIG
    return ACTION_PHOTO_TILE if tile_name == config.photo_tile else ACTION_REGULAR_TILE


def evaluate_rank(points: int, config: Optional[GameConfig] = None) -> str:
    """
    Evaluate the rank label for a score at the moment of winning.

    Returns:
        "Amazing", "Elite", "Solid" or an empty string below the lowest rank
    """
    config = config or DEFAULT_CONFIG
    for threshold, label in config.ranks:
        if points >= threshold:
            return label
    return ''


def build_initials(player_name: str) -> str:
    """Initials of each whitespace-separated token, joined by dots."""
    return '.'.join(token[0] for token in player_name.split())


def generate_hint(new_score: int, current_hint: str, player_name: str, config: Optional[GameConfig] = None) -> str:
    """
    Generate the hint once the score drops below the hint threshold.

    The hint is sticky: once set it is returned unchanged.

    Args:
        new_score: Score after the action that may unlock the hint
        current_hint: Hint shown so far, empty if none
        player_name: The answer

    Returns:
        The hint to show
    """
    config = config or DEFAULT_CONFIG
    if new_score < config.hint_threshold and not current_hint:
        return build_initials(player_name or '')
    return current_hint
