"""
Round sessions: one resumable game per (sport, playDate).

A RoundSession owns the progress of one round and writes it to the durable
store after every change. Mid-round progress lives under
`currentSession_<sport>_<playDate>`; once the round is finished the record
moves to `history_<sport>_<playDate>` so the finished round can be reviewed.

The RoundSessionManager tracks which key is active and loads rounds for it.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from .config import CURRENT_SESSION_PREFIX, DEFAULT_CONFIG, GameConfig
from .exceptions import DataFetchError, PersistenceError
from .game_state import COMPLETION_GAVE_UP, RoundProgress
from .guess_evaluator import GuessEvaluator, GuessOutcome
from .guest_stats import update_guest_stats
from .models import Round
from .result_submitter import ResultSubmitter, build_result_payload
from .scheduler import TaskScheduler
from .share import ShareController
from .storage import KeyValueStore, get_current_session_key, get_history_key
from .tile_reveal import TileClickOutcome, TileRevealStateMachine
from .utils import get_sport_emoji, get_current_date_string

logger = logging.getLogger(__name__)

# How RoundSession.start() found the round
START_FRESH = 'fresh'
START_RESTORED = 'restored'
START_HISTORY = 'history'

# RoundSessionManager status
STATUS_IDLE = 'idle'
STATUS_LOADING = 'loading'
STATUS_READY = 'ready'
STATUS_ERROR = 'error'

SessionKey = Tuple[str, str]


class RoundSession:
    def __init__(
        self,
        round_data: Round,
        store: KeyValueStore,
        submitter: Optional[ResultSubmitter] = None,
        config: Optional[GameConfig] = None,
        scheduler: Optional[TaskScheduler] = None,
        track_guest_stats: bool = True,
    ):
        self.round = round_data
        self.store = store
        self.submitter = submitter
        self.config = config or DEFAULT_CONFIG
        self.scheduler = scheduler or TaskScheduler()
        self.track_guest_stats = track_guest_stats

        self.progress = RoundProgress(score=self.config.initial_score)
        self.evaluator = GuessEvaluator(self.config)
        self.tiles = TileRevealStateMachine(self.config, self.scheduler)
        self.sharer = ShareController(self.config, self.scheduler)
        self.origin = START_FRESH

    @property
    def key(self) -> SessionKey:
        return self.round.key

    @property
    def current_session_key(self) -> str:
        return get_current_session_key(self.round.sport, self.round.playDate)

    @property
    def history_key(self) -> str:
        return get_history_key(self.round.sport, self.round.playDate)

    def start(self) -> str:
        self.origin = self._restore()
        # A finished round whose result never reached the backend gets another try
        if self.origin == START_HISTORY and self.progress.is_completed and self.submitter is not None:
            self.submitter.submit(self.round.sport, self.round.playDate, self.progress)
        return self.origin

    def _restore(self) -> str:
        """
        Restore the round from the durable store, or start it fresh.

        A finished round is restored from its history record. Otherwise a
        mid-round record is restored when it belongs to the same athlete; a
        record for another athlete is stale and removed.

        Returns:
            START_HISTORY, START_RESTORED or START_FRESH
        """
        record = self._read_record(self.history_key)
        if record is not None and self._belongs_to_round(record):
            self.progress = RoundProgress.from_dict(record.get('progress') or {})
            logger.info(f"Restored finished round {self.round.roundId} for {self.round.sport} {self.round.playDate}")
            return START_HISTORY

        record = self._read_record(self.current_session_key)
        if record is None:
            return START_FRESH

        if not self._belongs_to_round(record):
            logger.warning(
                f"Discarding stale session for {self.round.sport} {self.round.playDate}: "
                f"stored for another athlete"
            )
            self._remove(self.current_session_key)
            return START_FRESH

        self.progress = RoundProgress.from_dict(record.get('progress') or {})
        logger.info(f"Restored session for {self.round.sport} {self.round.playDate} with score {self.progress.score}")
        return START_RESTORED

    def submit_guess(self, raw_guess: str) -> GuessOutcome:
        was_completed = self.progress.is_completed
        outcome = self.evaluator.submit(self.progress, self.round.answer, raw_guess)
        if outcome.changed_state:
            self.persist()
        if outcome.completes_round and not was_completed:
            self._on_completed()
        return outcome

    def click_tile(self, index: int) -> TileClickOutcome:
        outcome = self.tiles.click(self.progress, self.round.answer, index)
        if outcome.changed_state:
            self.persist()
        return outcome

    def give_up(self) -> bool:
        """
        End the round without identifying the athlete. The score is kept.

        Returns:
            False if the round was already finished
        """
        if self.progress.is_completed:
            return False
        self.progress.completion_reason = COMPLETION_GAVE_UP
        self.progress.final_rank = ''
        self.progress.previous_close_guess = ''
        self.progress.show_results = True
        logger.info(f"Gave up round {self.round.roundId} with score {self.progress.score}")
        self.persist()
        self._on_completed()
        return True

    def share(self, sink: Callable[[str], None]) -> str:
        return self.sharer.share(self.round, self.progress, sink)

    def persist(self) -> bool:
        """
        Write the progress to the durable store.

        Store failures are logged; the game goes on in memory.

        Returns:
            True if the progress was written
        """
        record = {
            'playerName': self.round.answer,
            'roundId': self.round.roundId,
            'progress': self.progress.to_dict(),
        }
        try:
            if self.progress.is_completed:
                record['completed'] = self.progress.is_correct
                self.store.set_json(self.history_key, record)
                self.store.remove(self.current_session_key)
            else:
                self.store.set_json(self.current_session_key, record)
        except PersistenceError as e:
            logger.error(f"Could not save progress for {self.round.sport} {self.round.playDate}: {e}")
            return False
        return True

    def snapshot(self) -> Dict[str, Any]:
        """
        Everything the presentation layer needs to draw the round.

        Facts are only included for flipped tiles; the athlete's name only once
        the round is finished.
        """
        progress = self.progress
        player = self.round.player
        tiles = progress.tile_states(self.config.tile_names)
        for index, tile in enumerate(tiles):
            tile['index'] = index
            tile['fact'] = player.get_fact(tile['name']) if tile['flipped'] else None

        snapshot = {
            'roundId': self.round.roundId,
            'sport': self.round.sport,
            'sportEmoji': get_sport_emoji(self.round.sport),
            'playDate': self.round.playDate,
            'theme': self.round.theme,
            'score': progress.score,
            'tilesFlippedCount': progress.tiles_flipped_count,
            'incorrectGuesses': progress.incorrect_guesses,
            'hint': progress.hint,
            'completionReason': progress.completion_reason,
            'completed': progress.is_completed,
            'rank': progress.final_rank,
            'firstTileFlipped': progress.first_tile_flipped,
            'lastTileFlipped': progress.last_tile_flipped,
            'photoRevealed': progress.photo_revealed,
            'returningFromPhoto': progress.returning_from_photo,
            'message': progress.message,
            'messageType': progress.message_type,
            'showResults': progress.show_results,
            'copiedText': progress.copied_text,
            'tiles': tiles,
            'answer': None,
            'sportsReferenceURL': None,
            'stats': self.round.stats.to_dict(),
        }
        if progress.is_completed:
            snapshot['answer'] = player.name
            snapshot['sportsReferenceURL'] = player.sportsReferenceURL or None
        return snapshot

    def _on_completed(self) -> None:
        logger.info(
            f"Round {self.round.roundId} finished ({self.progress.completion_reason}) "
            f"with score {self.progress.score}"
        )
        if self.submitter is not None:
            self.submitter.submit(self.round.sport, self.round.playDate, self.progress)

        if self.track_guest_stats:
            try:
                update_guest_stats(self.store, self.round.sport, build_result_payload(self.progress))
            except PersistenceError as e:
                logger.error(f"Could not update guest stats for {self.round.sport}: {e}")

    def _belongs_to_round(self, record: Dict[str, Any]) -> bool:
        return record.get('playerName') == self.round.answer

    def _read_record(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            record = self.store.get_json(key)
        except PersistenceError as e:
            logger.error(f"Could not read {key}: {e}")
            return None
        if record is not None and not isinstance(record, dict):
            logger.warning(f"Ignoring malformed record under {key}")
            return None
        return record

    def _remove(self, key: str) -> None:
        try:
            self.store.remove(key)
        except PersistenceError as e:
            logger.error(f"Could not remove {key}: {e}")


class RoundSessionManager:
    """
    Switches between sports and dates and keeps one session per key.

    Fetching is split into begin_fetch() and complete_fetch() so that a fetch
    which completes after the player moved on to another key is dropped.
    """

    def __init__(
        self,
        fetch_round: Callable[[str, Optional[str]], Round],
        store: KeyValueStore,
        submitter: Optional[ResultSubmitter] = None,
        config: Optional[GameConfig] = None,
        scheduler: Optional[TaskScheduler] = None,
    ):
        self.fetch_round = fetch_round
        self.store = store
        self.submitter = submitter
        self.config = config or DEFAULT_CONFIG
        self.scheduler = scheduler or TaskScheduler()

        self.sessions: Dict[SessionKey, RoundSession] = {}
        self.active_key: Optional[SessionKey] = None
        self.status = STATUS_IDLE
        self.error = ''

    @property
    def current(self) -> Optional[RoundSession]:
        if self.active_key is None:
            return None
        return self.sessions.get(self.active_key)

    def begin_fetch(self, sport: str, play_date: Optional[str] = None) -> SessionKey:
        key = (sport, play_date or get_current_date_string())
        self.active_key = key
        self.status = STATUS_LOADING
        self.error = ''
        return key

    def complete_fetch(self, key: SessionKey, round_data: Round) -> Optional[RoundSession]:
        """
        Install a fetched round as the session for its key.

        Returns:
            The session, or None if the key is no longer active
        """
        if key != self.active_key:
            logger.warning(f"Discarding round fetched for {key}: active key is now {self.active_key}")
            return None

        session = self.sessions.get(key)
        if session is not None and session.round.answer == round_data.answer:
            # Already playing this round; keep the progress made so far
            self.status = STATUS_READY
            return session

        session = RoundSession(round_data, self.store, self.submitter, self.config, self.scheduler)
        session.start()
        self.sessions[key] = session
        self.status = STATUS_READY
        return session

    def fail_fetch(self, key: SessionKey, error: Exception) -> None:
        if key != self.active_key:
            logger.warning(f"Ignoring failed fetch for inactive key {key}: {error}")
            return
        logger.error(f"Failed to load round for {key[0]} {key[1]}: {error}")
        self.status = STATUS_ERROR
        self.error = str(error)

    def load(self, sport: str, play_date: Optional[str] = None) -> Optional[RoundSession]:
        """
        Fetch and start the round for a sport and date.

        Raises:
            DataFetchError: If the round could not be fetched; the manager stays
                in the error state until retry()
        """
        key = self.begin_fetch(sport, play_date)
        try:
            round_data = self.fetch_round(sport, play_date)
        except DataFetchError as e:
            self.fail_fetch(key, e)
            raise
        return self.complete_fetch(key, round_data)

    def retry(self) -> Optional[RoundSession]:
        if self.status != STATUS_ERROR or self.active_key is None:
            return self.current
        sport, play_date = self.active_key
        return self.load(sport, play_date)

    def clear_all_sessions(self) -> int:
        """
        Forget every unfinished round, e.g. when the player leaves the site.

        Returns:
            Number of removed records
        """
        self.sessions.clear()
        self.active_key = None
        self.status = STATUS_IDLE
        try:
            removed = self.store.remove_prefix(CURRENT_SESSION_PREFIX)
        except PersistenceError as e:
            logger.error(f"Could not clear sessions: {e}")
            return 0
        logger.info(f"Cleared {removed} unfinished sessions")
        return removed
