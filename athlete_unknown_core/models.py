from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from .config import TILE_NAMES
from .utils import safe_float, safe_int


@dataclass
class TileTracker:
    """
    Per-tile counters, used by round and guest statistics.
    """

    bio: int = 0
    playerInformation: int = 0
    draftInformation: int = 0
    yearsActive: int = 0
    teamsPlayedOn: int = 0
    jerseyNumbers: int = 0
    careerStats: int = 0
    personalAchievements: int = 0
    photo: int = 0

    def increment(self, tile_name: str) -> None:
        if tile_name in TILE_NAMES:
            setattr(self, tile_name, getattr(self, tile_name) + 1)

    def most_common(self) -> str:
        """Tile with the highest count, empty if all counts are zero."""
        max_count = 0
        most_common = ''
        for tile_name, count in self.to_dict().items():
            if count > max_count:
                max_count = count
                most_common = tile_name
        return most_common

    def least_common(self) -> str:
        """Tile with the lowest non-zero count, empty if all counts are zero."""
        min_count = None
        least_common = ''
        for tile_name, count in self.to_dict().items():
            if count > 0 and (min_count is None or count < min_count):
                min_count = count
                least_common = tile_name
        return least_common

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'TileTracker':
        """Create from dictionary, ignoring unknown tiles."""
        data = data or {}
        return cls(**{name: safe_int(data.get(name, 0)) for name in TILE_NAMES})


@dataclass
class PlayerFacts:
    """
    The mystery athlete: the answer plus one fact per tile.
    """

    name: str
    bio: str = ''
    playerInformation: str = ''
    draftInformation: str = ''
    yearsActive: str = ''
    teamsPlayedOn: str = ''
    jerseyNumbers: str = ''
    careerStats: str = ''
    personalAchievements: str = ''
    photo: str = ''
    sport: str = ''
    sportsReferenceURL: str = ''

    def get_fact(self, tile_name: str) -> str:
        """Fact revealed by a tile; the photo tile reveals the photo URL."""
        if tile_name not in TILE_NAMES:
            raise KeyError(tile_name)
        return getattr(self, tile_name)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerFacts':
        return cls(
            name=data.get('name', ''),
            bio=data.get('bio', ''),
            playerInformation=data.get('playerInformation', ''),
            draftInformation=data.get('draftInformation', ''),
            yearsActive=data.get('yearsActive', ''),
            teamsPlayedOn=data.get('teamsPlayedOn', ''),
            jerseyNumbers=data.get('jerseyNumbers', ''),
            careerStats=data.get('careerStats', ''),
            personalAchievements=data.get('personalAchievements', ''),
            photo=data.get('photo', ''),
            sport=data.get('sport', ''),
            sportsReferenceURL=data.get('sportsReferenceURL', ''),
        )


@dataclass
class RoundStats:
    """
    Backend-aggregated statistics for a round. Read-only on the client.
    """

    totalPlays: int = 0
    percentageCorrect: float = 0.0
    averageScore: float = 0.0
    averageCorrectScore: float = 0.0
    highestScore: int = 0
    averageNumberOfTileFlips: float = 0.0
    mostCommonFirstTileFlipped: str = ''
    mostCommonLastTileFlipped: str = ''
    mostCommonTileFlipped: str = ''
    leastCommonTileFlipped: str = ''
    mostTileFlippedTracker: TileTracker = field(default_factory=TileTracker)
    firstTileFlippedTracker: TileTracker = field(default_factory=TileTracker)
    lastTileFlippedTracker: TileTracker = field(default_factory=TileTracker)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'RoundStats':
        data = data or {}
        return cls(
            totalPlays=safe_int(data.get('totalPlays')),
            percentageCorrect=safe_float(data.get('percentageCorrect')),
            averageScore=safe_float(data.get('averageScore')),
            averageCorrectScore=safe_float(data.get('averageCorrectScore')),
            highestScore=safe_int(data.get('highestScore')),
            averageNumberOfTileFlips=safe_float(data.get('averageNumberOfTileFlips')),
            mostCommonFirstTileFlipped=data.get('mostCommonFirstTileFlipped') or '',
            mostCommonLastTileFlipped=data.get('mostCommonLastTileFlipped') or '',
            mostCommonTileFlipped=data.get('mostCommonTileFlipped') or '',
            leastCommonTileFlipped=data.get('leastCommonTileFlipped') or '',
            # Older payloads name the trackers without the "Tile" infix
            mostTileFlippedTracker=TileTracker.from_dict(
                data.get('mostTileFlippedTracker') or data.get('mostFlippedTracker')
            ),
            firstTileFlippedTracker=TileTracker.from_dict(
                data.get('firstTileFlippedTracker') or data.get('firstFlippedTracker')
            ),
            lastTileFlippedTracker=TileTracker.from_dict(
                data.get('lastTileFlippedTracker') or data.get('lastFlippedTracker')
            ),
        )


@dataclass(frozen=True)
class Round:
    """
    One day's puzzle for a sport. Immutable once fetched.
    """

    roundId: str
    sport: str
    playDate: str
    player: PlayerFacts
    stats: RoundStats = field(default_factory=RoundStats)
    theme: str = ''

    @property
    def key(self) -> tuple:
        return (self.sport, self.playDate)

    @property
    def answer(self) -> str:
        return self.player.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            'roundId': self.roundId,
            'sport': self.sport,
            'playDate': self.playDate,
            'theme': self.theme,
            'player': self.player.to_dict(),
            'stats': self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Round':
        """
        Create a Round from the backend JSON payload.

        Args:
            data: Decoded JSON with camelCase keys

        Returns:
            The parsed round

        Raises:
            KeyError: If the payload has no player
            TypeError: If the player is not an object
        """
        player_data = data['player']
        if not isinstance(player_data, dict):
            raise TypeError(f"Expected player object, got {type(player_data).__name__}")
        player = PlayerFacts.from_dict(player_data)
        return cls(
            roundId=data.get('roundId', ''),
            sport=data.get('sport') or player.sport,
            playDate=data.get('playDate', ''),
            player=player,
            stats=RoundStats.from_dict(data.get('stats')),
            theme=data.get('theme') or '',
        )
