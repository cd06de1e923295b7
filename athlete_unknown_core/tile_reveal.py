"""
Tile flip and photo reveal state machine.

Each tile goes Hidden -> Flipped once. The photo tile also drives a global
view state:

    Normal -> PhotoRevealed -> ReturningFromPhoto -> (after a delay) Normal

ReturningFromPhoto is cleared by a deferred task. Every view change bumps a
generation counter; a deferred task only applies if its generation is still
current, so a superseded timer cannot clobber newer state.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_CONFIG, GameConfig
from .exceptions import InvalidTileError
from .game_state import VIEW_NORMAL, VIEW_PHOTO_REVEALED, VIEW_RETURNING_FROM_PHOTO, RoundProgress
from .scheduler import ScheduledTask, TaskScheduler
from .scoring import calculate_new_score, generate_hint, tile_action

logger = logging.getLogger(__name__)

CLICK_PHOTO_HIDDEN = 'photoHidden'
CLICK_PHOTO_SHOWN = 'photoShown'
CLICK_NOOP = 'noop'
CLICK_FLIPPED = 'flipped'
CLICK_RECAP_FLIPPED = 'recapFlipped'


@dataclass
class TileClickOutcome:
    status: str
    tile_name: str
    penalty: int = 0

    @property
    def changed_state(self) -> bool:
        return self.status != CLICK_NOOP


class TileRevealStateMachine:
    def __init__(self, config: Optional[GameConfig] = None, scheduler: Optional[TaskScheduler] = None):
        self.config = config or DEFAULT_CONFIG
        self.scheduler = scheduler or TaskScheduler()
        self.generation = 0
        self._return_task: Optional[ScheduledTask] = None

    def tile_name(self, index: int) -> str:
        if not 0 <= index < self.config.total_tiles:
            raise InvalidTileError(f"Tile index {index} out of range")
        return self.config.tile_names[index]

    def click(self, progress: RoundProgress, answer: str, index: int) -> TileClickOutcome:
        """
        Handle a click on the tile at the given grid index.

        Args:
            progress: Progress of the round, updated in place
            answer: The athlete's name, needed for the hint
            index: Grid index of the clicked tile

        Returns:
            What the click did

        Raises:
            InvalidTileError: If the index is not a grid position
        """
        tile_name = self.tile_name(index)
        is_photo = tile_name == self.config.photo_tile

        # While the photo is shown any click flips the grid back
        if progress.view_state == VIEW_PHOTO_REVEALED:
            self._set_view(progress, VIEW_RETURNING_FROM_PHOTO)
            self._schedule_return(progress)
            return TileClickOutcome(CLICK_PHOTO_HIDDEN, tile_name)

        if progress.is_tile_flipped(tile_name):
            if is_photo:
                self._set_view(progress, VIEW_PHOTO_REVEALED)
                return TileClickOutcome(CLICK_PHOTO_SHOWN, tile_name)
            return TileClickOutcome(CLICK_NOOP, tile_name)

        progress.flipped_tiles.append(tile_name)

        # Finished rounds can still be browsed, but nothing is charged
        if progress.is_completed:
            if is_photo:
                self._set_view(progress, VIEW_PHOTO_REVEALED)
            return TileClickOutcome(CLICK_RECAP_FLIPPED, tile_name)

        new_score = calculate_new_score(progress.score, tile_action(tile_name, self.config), self.config)
        penalty = progress.score - new_score
        progress.hint = generate_hint(new_score, progress.hint, answer, self.config)
        progress.score = new_score
        if progress.tiles_flipped_count == 0:
            progress.first_tile_flipped = tile_name
        progress.last_tile_flipped = tile_name
        progress.tiles_flipped_count += 1

        if is_photo:
            self._set_view(progress, VIEW_PHOTO_REVEALED)

        logger.debug(f"Flipped tile '{tile_name}' for {penalty} points, score now {progress.score}")
        return TileClickOutcome(CLICK_FLIPPED, tile_name, penalty)

    def _set_view(self, progress: RoundProgress, view_state: str) -> None:
        self.generation += 1
        if self._return_task is not None:
            self._return_task.cancel()
            self._return_task = None
        progress.view_state = view_state

    def _schedule_return(self, progress: RoundProgress) -> None:
        generation = self.generation

        def finish_return():
            if generation != self.generation or progress.view_state != VIEW_RETURNING_FROM_PHOTO:
                return
            progress.view_state = VIEW_NORMAL
            self._return_task = None

        self._return_task = self.scheduler.call_later(self.config.photo_return_delay_ms, finish_return)
