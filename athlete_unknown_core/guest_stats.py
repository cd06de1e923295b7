"""
Aggregate statistics for players without an account, kept in the durable store.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .config import GUEST_STATS_KEY, SPORT_LIST
from .exceptions import PersistenceError
from .models import TileTracker
from .result_submitter import ResultPayload
from .storage import KeyValueStore
from .utils import calculate_percentage, safe_float, safe_int

logger = logging.getLogger(__name__)


@dataclass
class GuestSportStats:
    sport: str
    totalPlays: int = 0
    correctPlays: int = 0
    percentageCorrect: float = 0.0
    highestScore: int = 0
    averageCorrectScore: float = 0.0
    averageNumberOfTileFlips: float = 0.0
    mostCommonFirstTileFlipped: str = ''
    mostCommonLastTileFlipped: str = ''
    mostCommonTileFlipped: str = ''
    leastCommonTileFlipped: str = ''
    firstTileFlippedTracker: TileTracker = field(default_factory=TileTracker)
    lastTileFlippedTracker: TileTracker = field(default_factory=TileTracker)
    mostTileFlippedTracker: TileTracker = field(default_factory=TileTracker)

    def record(self, result: ResultPayload) -> None:
        """Fold one finished round into the running averages."""
        self.totalPlays += 1

        if result.completed:
            previous_total = self.averageCorrectScore * self.correctPlays
            self.correctPlays += 1
            self.averageCorrectScore = (previous_total + result.score) / self.correctPlays
            if result.score > self.highestScore:
                self.highestScore = result.score
        self.percentageCorrect = calculate_percentage(self.correctPlays, self.totalPlays)

        previous_flips = self.averageNumberOfTileFlips * (self.totalPlays - 1)
        self.averageNumberOfTileFlips = (previous_flips + len(result.flipped_tiles)) / self.totalPlays

        if not result.flipped_tiles:
            return

        self.firstTileFlippedTracker.increment(result.flipped_tiles[0])
        self.lastTileFlippedTracker.increment(result.flipped_tiles[-1])
        for tile_name in result.flipped_tiles:
            self.mostTileFlippedTracker.increment(tile_name)

        self.mostCommonFirstTileFlipped = self.firstTileFlippedTracker.most_common()
        self.mostCommonLastTileFlipped = self.lastTileFlippedTracker.most_common()
        self.mostCommonTileFlipped = self.mostTileFlippedTracker.most_common()
        self.leastCommonTileFlipped = self.mostTileFlippedTracker.least_common()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GuestSportStats':
        total_plays = safe_int(data.get('totalPlays'))
        percentage_correct = safe_float(data.get('percentageCorrect'))
        correct_plays = data.get('correctPlays')
        if correct_plays is None:
            # Records written before the correct count was stored
            correct_plays = round(total_plays * percentage_correct / 100)
        return cls(
            sport=data.get('sport', ''),
            totalPlays=total_plays,
            correctPlays=safe_int(correct_plays),
            percentageCorrect=percentage_correct,
            highestScore=safe_int(data.get('highestScore')),
            averageCorrectScore=safe_float(data.get('averageCorrectScore')),
            averageNumberOfTileFlips=safe_float(data.get('averageNumberOfTileFlips')),
            mostCommonFirstTileFlipped=data.get('mostCommonFirstTileFlipped') or '',
            mostCommonLastTileFlipped=data.get('mostCommonLastTileFlipped') or '',
            mostCommonTileFlipped=data.get('mostCommonTileFlipped') or '',
            leastCommonTileFlipped=data.get('leastCommonTileFlipped') or '',
            firstTileFlippedTracker=TileTracker.from_dict(data.get('firstTileFlippedTracker')),
            lastTileFlippedTracker=TileTracker.from_dict(data.get('lastTileFlippedTracker')),
            mostTileFlippedTracker=TileTracker.from_dict(data.get('mostTileFlippedTracker')),
        )


@dataclass
class GuestStats:
    sports: List[GuestSportStats] = field(default_factory=list)

    @classmethod
    def empty(cls) -> 'GuestStats':
        return cls(sports=[GuestSportStats(sport=sport) for sport in SPORT_LIST])

    def for_sport(self, sport: str) -> GuestSportStats:
        for sport_stats in self.sports:
            if sport_stats.sport == sport:
                return sport_stats
        sport_stats = GuestSportStats(sport=sport)
        self.sports.append(sport_stats)
        return sport_stats

    def to_dict(self) -> Dict[str, Any]:
        return {'sports': [sport_stats.to_dict() for sport_stats in self.sports]}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'GuestStats':
        if not data:
            return cls.empty()
        return cls(sports=[GuestSportStats.from_dict(item) for item in data.get('sports', [])])


def load_guest_stats(store: KeyValueStore) -> GuestStats:
    try:
        return GuestStats.from_dict(store.get_json(GUEST_STATS_KEY))
    except PersistenceError as e:
        logger.error(f"Error loading guest stats, starting over: {e}")
        return GuestStats.empty()


def update_guest_stats(store: KeyValueStore, sport: str, result: ResultPayload) -> GuestSportStats:
    """
    Record a finished round in the guest statistics.

    Args:
        store: Durable store holding the statistics
        sport: Sport of the finished round
        result: Result of the finished round

    Returns:
        The updated statistics for the sport

    Raises:
        PersistenceError: If the statistics could not be saved
    """
    stats = load_guest_stats(store)
    sport_stats = stats.for_sport(sport)
    sport_stats.record(result)
    store.set_json(GUEST_STATS_KEY, stats.to_dict())
    logger.debug(f"Updated guest stats for {sport}: {sport_stats.totalPlays} plays")
    return sport_stats


def clear_guest_stats(store: KeyValueStore) -> None:
    store.remove(GUEST_STATS_KEY)
    logger.info("Cleared guest stats")
