from typing import Dict, Any, List, Tuple
from dataclasses import dataclass, field
import json


# Sports
SPORT_BASEBALL = 'baseball'
SPORT_BASKETBALL = 'basketball'
SPORT_FOOTBALL = 'football'

SPORT_LIST = [SPORT_BASEBALL, SPORT_BASKETBALL, SPORT_FOOTBALL]
DEFAULT_SPORT = SPORT_BASEBALL

# Scoring
INITIAL_SCORE = 100
REGULAR_TILE_PENALTY = 3
PHOTO_TILE_PENALTY = 6
INCORRECT_GUESS_PENALTY = 2
HINT_THRESHOLD = 70

# Rank thresholds, highest first
RANK_AMAZING = 'Amazing'
RANK_ELITE = 'Elite'
RANK_SOLID = 'Solid'
RANKS = [
    (95, RANK_AMAZING),
    (90, RANK_ELITE),
    (80, RANK_SOLID),
]

# Maximum edit distance for a "close" guess
CLOSE_GUESS_DISTANCE = 3

# Close-guess reveal policies
REVEAL_POLICY_TWO_STRIKE = 'two_strike'
REVEAL_POLICY_SINGLE_STRIKE = 'single_strike'

# Tiles, in grid order. Order matters for the share grid.
TILE_BIO = 'bio'
TILE_PLAYER_INFORMATION = 'playerInformation'
TILE_DRAFT_INFORMATION = 'draftInformation'
TILE_YEARS_ACTIVE = 'yearsActive'
TILE_TEAMS_PLAYED_ON = 'teamsPlayedOn'
TILE_JERSEY_NUMBERS = 'jerseyNumbers'
TILE_CAREER_STATS = 'careerStats'
TILE_PERSONAL_ACHIEVEMENTS = 'personalAchievements'
TILE_PHOTO = 'photo'

TILE_NAMES = [
    TILE_BIO,
    TILE_PLAYER_INFORMATION,
    TILE_DRAFT_INFORMATION,
    TILE_YEARS_ACTIVE,
    TILE_TEAMS_PLAYED_ON,
    TILE_JERSEY_NUMBERS,
    TILE_CAREER_STATS,
    TILE_PERSONAL_ACHIEVEMENTS,
    TILE_PHOTO,
]
TOTAL_TILES = len(TILE_NAMES)
GRID_COLUMNS = 3

# Timing, in milliseconds
PHOTO_FLIP_ANIMATION_DURATION = 650
SHARE_COPIED_MESSAGE_DURATION = 3000

# Share grid glyphs
FLIPPED_GLYPH = '🟨'
UNFLIPPED_GLYPH = '🟦'

SPORT_EMOJIS = {
    SPORT_BASEBALL: '⚾',
    SPORT_BASKETBALL: '🏀',
    SPORT_FOOTBALL: '🏈',
}

SPORTS_REFERENCE_URLS = {
    SPORT_BASEBALL: ('https://www.baseball-reference.com/players/', '.shtml'),
    SPORT_BASKETBALL: ('https://www.basketball-reference.com/players/', '.html'),
    SPORT_FOOTBALL: ('https://www.pro-football-reference.com/players/', '.htm'),
}

# Durable store key prefixes
CURRENT_SESSION_PREFIX = 'currentSession_'
HISTORY_PREFIX = 'history_'
GAME_SUBMITTED_PREFIX = 'submitted_'
GUEST_STATS_KEY = 'guestStats'


@dataclass
class GameConfig:
    """
    Tunable rules for a round.

    The defaults are the production rules; tests and alternative deployments
    can build a config with different penalties or reveal policy.
    """

    initial_score: int = INITIAL_SCORE
    regular_tile_penalty: int = REGULAR_TILE_PENALTY
    photo_tile_penalty: int = PHOTO_TILE_PENALTY
    incorrect_guess_penalty: int = INCORRECT_GUESS_PENALTY
    hint_threshold: int = HINT_THRESHOLD
    close_guess_distance: int = CLOSE_GUESS_DISTANCE
    reveal_policy: str = REVEAL_POLICY_TWO_STRIKE
    # (threshold, label) pairs, highest threshold first
    ranks: List[Tuple[int, str]] = field(default_factory=lambda: list(RANKS))

    tile_names: List[str] = field(default_factory=lambda: list(TILE_NAMES))
    photo_tile: str = TILE_PHOTO

    photo_return_delay_ms: int = PHOTO_FLIP_ANIMATION_DURATION
    copied_message_delay_ms: int = SHARE_COPIED_MESSAGE_DURATION

    sports: List[str] = field(default_factory=lambda: list(SPORT_LIST))
    default_sport: str = DEFAULT_SPORT

    # Only submit results for the round of the current day
    submit_only_current_day: bool = True

    @property
    def total_tiles(self) -> int:
        return len(self.tile_names)

    def tile_penalty(self, tile_name: str) -> int:
        """Penalty for flipping the given tile for the first time."""
        if tile_name == self.photo_tile:
            return self.photo_tile_penalty
        return self.regular_tile_penalty

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'initial_score': self.initial_score,
            'regular_tile_penalty': self.regular_tile_penalty,
            'photo_tile_penalty': self.photo_tile_penalty,
            'incorrect_guess_penalty': self.incorrect_guess_penalty,
            'hint_threshold': self.hint_threshold,
            'close_guess_distance': self.close_guess_distance,
            'reveal_policy': self.reveal_policy,
            'ranks': [list(rank) for rank in self.ranks],
            'tile_names': self.tile_names,
            'photo_tile': self.photo_tile,
            'photo_return_delay_ms': self.photo_return_delay_ms,
            'copied_message_delay_ms': self.copied_message_delay_ms,
            'sports': self.sports,
            'default_sport': self.default_sport,
            'submit_only_current_day': self.submit_only_current_day,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameConfig':
        """Create from dictionary."""
        data = dict(data)
        if 'ranks' in data:
            data['ranks'] = [(int(threshold), label) for threshold, label in data['ranks']]
        return cls(**data)

    @classmethod
    def from_json_file(cls, file_path: str) -> 'GameConfig':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)


DEFAULT_CONFIG = GameConfig()
