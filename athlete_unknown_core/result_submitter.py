"""
At-most-once submission of a finished round's result.

A marker in the durable store, keyed by (sport, playDate), records a
successful submission. The marker is only written after the transport
acknowledged the result, so a failed attempt can be retried by a later
session. Within one submitter (one page lifetime) a key is attempted once.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from .config import DEFAULT_CONFIG, GameConfig
from .exceptions import PersistenceError, SubmissionError
from .game_state import RoundProgress
from .storage import KeyValueStore, get_game_submission_key

logger = logging.getLogger(__name__)

# (sport, play_date, payload) -> acknowledgement
Transport = Callable[[str, str, 'ResultPayload'], Any]


@dataclass
class ResultPayload:
    score: int
    completed: bool
    flipped_tiles: List[str] = field(default_factory=list)
    first_tile_flipped: Optional[str] = None
    last_tile_flipped: Optional[str] = None
    incorrect_guesses: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'completed': self.completed,
            'flippedTileNamesInOrder': list(self.flipped_tiles),
            'firstTileFlipped': self.first_tile_flipped,
            'lastTileFlipped': self.last_tile_flipped,
            'incorrectGuesses': self.incorrect_guesses,
        }


def build_result_payload(progress: RoundProgress) -> ResultPayload:
    """
    Build the result of a finished round.

    Only flips made before completion count; tiles browsed afterwards are
    appended past `tiles_flipped_count`.
    """
    return ResultPayload(
        score=progress.score,
        completed=progress.is_correct,
        flipped_tiles=progress.flipped_tiles[:progress.tiles_flipped_count],
        first_tile_flipped=progress.first_tile_flipped,
        last_tile_flipped=progress.last_tile_flipped,
        incorrect_guesses=progress.incorrect_guesses,
    )


class ResultSubmitter:
    def __init__(
        self,
        transport: Transport,
        store: KeyValueStore,
        config: Optional[GameConfig] = None,
        today: Callable[[], date] = date.today,
    ):
        self.transport = transport
        self.store = store
        self.config = config or DEFAULT_CONFIG
        self.today = today
        self._attempted: Set[Tuple[str, str]] = set()

    def is_submitted(self, sport: str, play_date: str) -> bool:
        try:
            return self.store.get(get_game_submission_key(sport, play_date)) is not None
        except PersistenceError as e:
            logger.error(f"Could not read submission marker for {sport} {play_date}: {e}")
            return False

    def submit(self, sport: str, play_date: str, progress: RoundProgress) -> bool:
        """
        Submit the result of a finished round, at most once.

        Args:
            sport: Sport of the round
            play_date: Play date of the round (YYYY-MM-DD)
            progress: Progress of the finished round

        Returns:
            True if this call delivered the result
        """
        if not progress.is_completed:
            return False

        if self.config.submit_only_current_day and play_date != self.today().isoformat():
            logger.info(f"Skipping result submission for {sport} {play_date}: not today's round")
            return False

        key = (sport, play_date)
        if key in self._attempted or self.is_submitted(sport, play_date):
            return False
        self._attempted.add(key)

        payload = build_result_payload(progress)
        try:
            self.transport(sport, play_date, payload)
        except SubmissionError as e:
            logger.error(f"Failed to submit result for {sport} {play_date}: {e}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error submitting result for {sport} {play_date}: {e}")
            return False

        try:
            self.store.set_json(
                get_game_submission_key(sport, play_date),
                {'submittedAt': datetime.now(timezone.utc).isoformat(), 'score': payload.score},
            )
        except PersistenceError as e:
            logger.error(f"Result for {sport} {play_date} submitted but marker not saved: {e}")

        logger.info(f"Submitted result for {sport} {play_date}: score {payload.score}")
        return True
