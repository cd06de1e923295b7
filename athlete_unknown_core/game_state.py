import json
from typing import Any, Dict, List, Optional

from .config import INITIAL_SCORE

# Completion reasons
COMPLETION_NONE = 'none'
COMPLETION_WON = 'won'
COMPLETION_REVEALED = 'revealed'
COMPLETION_GAVE_UP = 'gaveUp'

COMPLETION_REASONS = (COMPLETION_NONE, COMPLETION_WON, COMPLETION_REVEALED, COMPLETION_GAVE_UP)

# Global photo view states
VIEW_NORMAL = 'normal'
VIEW_PHOTO_REVEALED = 'photoRevealed'
VIEW_RETURNING_FROM_PHOTO = 'returningFromPhoto'

# Message types shown with the last guess
MESSAGE_SUCCESS = 'success'
MESSAGE_CLOSE = 'close'
MESSAGE_ALMOST = 'almost'
MESSAGE_ERROR = 'error'


class RoundProgress:
    """
    Mutable progress of one round, owned by its RoundSession.

    `returning_from_photo`, `show_results` and `copied_text` are UI-only
    flags and are never serialized.
    """

    def __init__(
        self,
        score: int = INITIAL_SCORE,
        flipped_tiles: Optional[List[str]] = None,
        tiles_flipped_count: int = 0,
        incorrect_guesses: int = 0,
        hint: str = '',
        completion_reason: str = COMPLETION_NONE,
        final_rank: str = '',
        first_tile_flipped: Optional[str] = None,
        last_tile_flipped: Optional[str] = None,
        photo_revealed: bool = False,
        last_submitted_guess: str = '',
        previous_close_guess: str = '',
        message: str = '',
        message_type: str = '',
    ) -> None:
        self.score: int = score
        # Tile names in the order they were flipped
        self.flipped_tiles: List[str] = list(flipped_tiles or [])
        self.tiles_flipped_count: int = tiles_flipped_count
        self.incorrect_guesses: int = incorrect_guesses
        self.hint: str = hint
        self.completion_reason: str = completion_reason
        self.final_rank: str = final_rank
        self.first_tile_flipped: Optional[str] = first_tile_flipped
        self.last_tile_flipped: Optional[str] = last_tile_flipped
        self.view_state: str = VIEW_PHOTO_REVEALED if photo_revealed else VIEW_NORMAL
        self.last_submitted_guess: str = last_submitted_guess
        self.previous_close_guess: str = previous_close_guess
        self.message: str = message
        self.message_type: str = message_type

        self.show_results: bool = False
        self.copied_text: str = ''

    @property
    def is_completed(self) -> bool:
        return self.completion_reason != COMPLETION_NONE

    @property
    def is_correct(self) -> bool:
        """Whether the player identified the athlete (won or revealed by a close guess)."""
        return self.completion_reason in (COMPLETION_WON, COMPLETION_REVEALED)

    @property
    def photo_revealed(self) -> bool:
        return self.view_state == VIEW_PHOTO_REVEALED

    @property
    def returning_from_photo(self) -> bool:
        return self.view_state == VIEW_RETURNING_FROM_PHOTO

    def is_tile_flipped(self, tile_name: str) -> bool:
        return tile_name in self.flipped_tiles

    def flipped_pattern(self, tile_names: List[str]) -> List[bool]:
        """Flip state of each tile in grid order."""
        return [name in self.flipped_tiles for name in tile_names]

    def tile_states(self, tile_names: List[str]) -> List[Dict[str, Any]]:
        return [{'name': name, 'flipped': name in self.flipped_tiles} for name in tile_names]

    @classmethod
    def from_dict(cls, data: dict) -> "RoundProgress":
        """Create a RoundProgress instance from a dictionary."""
        completion_reason = data.get("completion_reason", COMPLETION_NONE)
        if completion_reason not in COMPLETION_REASONS:
            completion_reason = COMPLETION_NONE

        progress = cls(
            score=data.get("score", INITIAL_SCORE),
            flipped_tiles=data.get("flipped_tiles", []),
            tiles_flipped_count=data.get("tiles_flipped_count", 0),
            incorrect_guesses=data.get("incorrect_guesses", 0),
            hint=data.get("hint", ""),
            completion_reason=completion_reason,
            final_rank=data.get("final_rank", ""),
            first_tile_flipped=data.get("first_tile_flipped"),
            last_tile_flipped=data.get("last_tile_flipped"),
            photo_revealed=data.get("photo_revealed", False),
            last_submitted_guess=data.get("last_submitted_guess", ""),
            previous_close_guess=data.get("previous_close_guess", ""),
            message=data.get("message", ""),
            message_type=data.get("message_type", ""),
        )
        return progress

    def to_dict(self) -> Dict[str, Any]:
        """Convert the RoundProgress instance to a dictionary."""
        return {
            "score": self.score,
            "flipped_tiles": list(self.flipped_tiles),
            "tiles_flipped_count": self.tiles_flipped_count,
            "incorrect_guesses": self.incorrect_guesses,
            "hint": self.hint,
            "completion_reason": self.completion_reason,
            "final_rank": self.final_rank,
            "first_tile_flipped": self.first_tile_flipped,
            "last_tile_flipped": self.last_tile_flipped,
            "photo_revealed": self.photo_revealed,
            "last_submitted_guess": self.last_submitted_guess,
            "previous_close_guess": self.previous_close_guess,
            "message": self.message,
            "message_type": self.message_type,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "RoundProgress":
        return cls.from_dict(json.loads(json_str))
