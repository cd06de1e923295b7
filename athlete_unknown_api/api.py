import logging
from functools import wraps
from typing import Optional

from ninja import NinjaAPI, Schema

from athlete_unknown_app.game_service import leave_site, open_round_session
from athlete_unknown_app.metrics import record_guess, record_round_completion, record_round_start, record_tile_click, track_request_latency
from athlete_unknown_app.tracing import add_span_attribute, trace_operation
from athlete_unknown_core.exceptions import (
    DataFetchError,
    InputValidationError,
    InvalidSportError,
    InvalidTileError,
)

logger = logging.getLogger(__name__)

api = NinjaAPI(title="Athlete Unknown API")


class GuessSchema(Schema):
    guess: str
    play_date: Optional[str] = None


def _error(request, message, status):
    return api.create_response(request, {"status": "error", "message": message}, status=status)


@api.exception_handler(DataFetchError)
def data_fetch_error(request, exc):
    return _error(request, str(exc), 502)


@api.exception_handler(InvalidSportError)
def invalid_sport(request, exc):
    return _error(request, str(exc), 404)


@api.exception_handler(InvalidTileError)
def invalid_tile(request, exc):
    return _error(request, str(exc), 400)


@api.exception_handler(InputValidationError)
def invalid_input(request, exc):
    return _error(request, str(exc), 400)


def instrumented(endpoint):
    """Record latency and a trace span for an endpoint."""

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            timer_stop = track_request_latency(endpoint)
            attributes = {"sport": kwargs["sport"]} if "sport" in kwargs else {}
            try:
                with trace_operation(f"api.{endpoint}", **attributes):
                    response = view_func(request, *args, **kwargs)
            except Exception:
                timer_stop(status="error")
                raise
            timer_stop()
            return response

        return wrapper

    return decorator


def _record_completion(session):
    progress = session.progress
    record_round_completion(session.round.sport, progress.completion_reason, progress.score)
    add_span_attribute("round.completion_reason", progress.completion_reason)


@api.get("/health")
def health_check(request):
    return {"status": "healthy", "message": "Service is up and running"}


@api.get("/round/{sport}")
@instrumented("get_round")
def get_round(request, sport: str, play_date: Optional[str] = None):
    session = open_round_session(request, sport, play_date)
    record_round_start(session.round.sport, session.origin)
    return {"round": session.snapshot()}


@api.post("/round/{sport}/guess")
@instrumented("submit_guess")
def submit_guess(request, sport: str, data: GuessSchema):
    session = open_round_session(request, sport, data.play_date)
    outcome = session.submit_guess(data.guess)
    record_guess(session.round.sport, outcome.status)
    if outcome.completes_round:
        _record_completion(session)
    return {
        "outcome": {
            "status": outcome.status,
            "message": outcome.message,
            "messageType": outcome.message_type,
        },
        "round": session.snapshot(),
    }


@api.post("/round/{sport}/tiles/{index}")
@instrumented("click_tile")
def click_tile(request, sport: str, index: int, play_date: Optional[str] = None):
    session = open_round_session(request, sport, play_date)
    outcome = session.click_tile(index)
    record_tile_click(session.round.sport, outcome.tile_name, outcome.status)
    return {
        "click": {
            "status": outcome.status,
            "tile": outcome.tile_name,
            "penalty": outcome.penalty,
        },
        "round": session.snapshot(),
    }


@api.post("/round/{sport}/give-up")
@instrumented("give_up")
def give_up(request, sport: str, play_date: Optional[str] = None):
    session = open_round_session(request, sport, play_date)
    if session.give_up():
        _record_completion(session)
    return {"round": session.snapshot()}


@api.get("/round/{sport}/share")
@instrumented("share")
def share(request, sport: str, play_date: Optional[str] = None):
    session = open_round_session(request, sport, play_date)
    # The response body is the clipboard over HTTP
    share_text = session.share(lambda text: None)
    return {"shareText": share_text, "copied": bool(session.progress.copied_text)}


@api.post("/leave")
@instrumented("leave")
def leave(request):
    cleared = leave_site(request)
    logger.info(f"Player left, cleared {cleared} unfinished rounds")
    return {"status": "success", "cleared": cleared}
