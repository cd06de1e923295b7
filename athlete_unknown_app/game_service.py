"""
Request-level wiring of the round engine.

Every request rebuilds the session of the requested round from the Django
session, applies one player action and lets the engine persist the result.
Fetched rounds are shared between requests through the Django cache.
"""

import dataclasses
import logging
from datetime import datetime
from typing import Optional

from django.conf import settings
from django.core.cache import cache

from athlete_unknown_core.config import GameConfig
from athlete_unknown_core.exceptions import DataFetchError, InputValidationError, SubmissionError
from athlete_unknown_core.models import Round
from athlete_unknown_core.result_submitter import ResultPayload, ResultSubmitter
from athlete_unknown_core.round_session import RoundSession, RoundSessionManager
from athlete_unknown_core.utils import get_current_date_string, require_sport

from .api_client import RoundApiClient
from .metrics import record_result_submission, record_round_fetch_failure
from .session_store import DjangoSessionStore
from .tracing import add_span_attribute, trace_function

logger = logging.getLogger(__name__)


def get_game_config() -> GameConfig:
    config_file = getattr(settings, "ATHLETE_UNKNOWN_GAME_CONFIG_FILE", "")
    if config_file:
        return GameConfig.from_json_file(config_file)
    return GameConfig(
        reveal_policy=settings.ATHLETE_UNKNOWN_REVEAL_POLICY,
        submit_only_current_day=settings.ATHLETE_UNKNOWN_SUBMIT_ONLY_CURRENT_DAY,
    )


def get_api_client() -> RoundApiClient:
    return RoundApiClient(settings.ATHLETE_UNKNOWN_API_URL, timeout=settings.ATHLETE_UNKNOWN_API_TIMEOUT)


def parse_play_date(value: Optional[str]) -> str:
    """
    Validate a play date parameter.

    Returns:
        The date in YYYY-MM-DD format, today if no date was given

    Raises:
        InputValidationError: If the value is not a valid date
    """
    if not value:
        return get_current_date_string()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date().isoformat()
    except ValueError as e:
        raise InputValidationError(f"Invalid play date '{value}', expected YYYY-MM-DD") from e


def get_round_cache_key(sport: str, play_date: str) -> str:
    return f"athlete_unknown_round_{sport}_{play_date}"


@trace_function("round.get")
def get_round(sport: str, play_date: Optional[str] = None) -> Round:
    """
    Get the round of a sport for a date, from the cache or the backend.

    Raises:
        DataFetchError: If the round is not cached and the backend fails
    """
    play_date = parse_play_date(play_date)
    cache_key = get_round_cache_key(sport, play_date)

    cached = cache.get(cache_key)
    if cached is not None:
        return Round.from_dict(cached)

    try:
        round_data = get_api_client().fetch_round(sport, play_date)
    except DataFetchError:
        record_round_fetch_failure(sport)
        raise

    # Session keys need the date even if the backend left it out
    if not round_data.playDate:
        round_data = dataclasses.replace(round_data, playDate=play_date)

    cache.set(cache_key, round_data.to_dict(), settings.ATHLETE_UNKNOWN_ROUND_CACHE_SECONDS)
    return round_data


def submit_result(sport: str, play_date: str, payload: ResultPayload):
    try:
        response = get_api_client().submit_result(sport, play_date, payload)
    except SubmissionError:
        record_result_submission(sport, "error")
        raise
    record_result_submission(sport, "success")
    return response


def get_session_manager(request) -> RoundSessionManager:
    config = get_game_config()
    store = DjangoSessionStore(request.session)
    submitter = ResultSubmitter(submit_result, store, config=config)
    return RoundSessionManager(get_round, store, submitter=submitter, config=config)


def open_round_session(request, sport: str, play_date: Optional[str] = None) -> RoundSession:
    """
    Load the round and the player's progress on it.

    Raises:
        InvalidSportError: If the sport is not supported
        InputValidationError: If the play date is malformed
        DataFetchError: If the round could not be fetched
    """
    sport = require_sport(sport)
    play_date = parse_play_date(play_date)

    session = get_session_manager(request).load(sport, play_date)
    add_span_attribute("round.id", session.round.roundId)
    add_span_attribute("round.origin", session.origin)
    return session


def leave_site(request) -> int:
    """Drop every unfinished round of the requesting player."""
    return get_session_manager(request).clear_all_sessions()
