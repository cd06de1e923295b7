import logging
from typing import Any, Dict, Optional

import requests

from athlete_unknown_core.exceptions import DataFetchError, SubmissionError
from athlete_unknown_core.models import Round
from athlete_unknown_core.result_submitter import ResultPayload
from athlete_unknown_core.utils import get_current_date_string

from .tracing import trace_function

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def to_backend_payload(payload: ResultPayload) -> Dict[str, Any]:
    """Translate a round result into the body the results endpoint expects."""
    return {
        'score': payload.score,
        'isCorrect': payload.completed,
        'tilesFlipped': list(payload.flipped_tiles),
        'firstTileFlipped': payload.first_tile_flipped,
        'lastTileFlipped': payload.last_tile_flipped,
        'incorrectGuesses': payload.incorrect_guesses,
    }


def _describe_error(response) -> str:
    error_msg = f"HTTP {response.status_code}"
    try:
        error_data = response.json()
    except ValueError:
        return f"{error_msg} - {response.text}"
    if isinstance(error_data, dict) and 'message' in error_data:
        error_msg += f" - {error_data['message']}"
    return error_msg


class RoundApiClient:
    """
    Client for the Athlete Unknown backend.

    Only two calls are used: fetching the round of a day and posting the
    result of a finished round.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = session or requests.Session()

    @trace_function("backend.fetch_round")
    def fetch_round(self, sport: str, play_date: Optional[str] = None) -> Round:
        """
        Fetch the round of a sport for a date.

        Args:
            sport: Sport of the round
            play_date: Date in YYYY-MM-DD format, today if omitted

        Returns:
            The parsed round

        Raises:
            DataFetchError: On network errors, error responses or unusable payloads
        """
        play_date = play_date or get_current_date_string()
        url = f"{self.base_url}/v1/round"
        params = {'sport': sport, 'playDate': play_date}

        try:
            response = self.http.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise DataFetchError(f"Failed to load round data: network error: {e}") from e

        if response.status_code != 200:
            raise DataFetchError(f"Failed to load round data: {_describe_error(response)}")

        try:
            round_data = Round.from_dict(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise DataFetchError(f"Failed to load round data: malformed payload: {e}") from e

        logger.info(f"Fetched round {round_data.roundId} for {sport} {play_date}")
        return round_data

    @trace_function("backend.submit_result")
    def submit_result(self, sport: str, play_date: str, payload: ResultPayload) -> Dict[str, Any]:
        """
        Post the result of a finished round.

        Raises:
            SubmissionError: On network errors or error responses
        """
        url = f"{self.base_url}/v1/results"
        params = {'sport': sport, 'playDate': play_date}

        try:
            response = self.http.post(url, params=params, json=to_backend_payload(payload), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SubmissionError(f"Failed to submit game results: network error: {e}") from e

        if response.status_code not in (200, 201):
            raise SubmissionError(f"Failed to submit game results: {_describe_error(response)}")

        try:
            return response.json()
        except ValueError:
            return {}
