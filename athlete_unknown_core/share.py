import logging
from typing import Callable, Optional

from .config import DEFAULT_CONFIG, FLIPPED_GLYPH, GRID_COLUMNS, UNFLIPPED_GLYPH, GameConfig
from .game_state import RoundProgress
from .models import Round
from .scheduler import ScheduledTask, TaskScheduler
from .utils import extract_round_number

logger = logging.getLogger(__name__)


def build_share_text(round_data: Round, progress: RoundProgress, config: Optional[GameConfig] = None) -> str:
    """
    Build the spoiler-free summary of a round.

    One glyph per tile in grid order, three per row, followed by the score:

        Athlete Unknown Baseball #12
        🟨🟦🟦
        🟦🟦🟦
        🟦🟦🟨
        Score: 91
    """
    config = config or DEFAULT_CONFIG
    round_number = extract_round_number(round_data.roundId)
    share_text = f"Athlete Unknown {round_data.sport.capitalize()} #{round_number}\n"

    pattern = progress.flipped_pattern(config.tile_names)
    for index, flipped in enumerate(pattern):
        share_text += FLIPPED_GLYPH if flipped else UNFLIPPED_GLYPH
        if (index + 1) % GRID_COLUMNS == 0:
            share_text += "\n"

    share_text += f"Score: {progress.score}"
    return share_text


class ShareController:
    """
    Copies the share text to a sink and shows it until the banner delay passes.
    """

    def __init__(self, config: Optional[GameConfig] = None, scheduler: Optional[TaskScheduler] = None):
        self.config = config or DEFAULT_CONFIG
        self.scheduler = scheduler or TaskScheduler()
        self.generation = 0
        self._clear_task: Optional[ScheduledTask] = None

    def share(self, round_data: Round, progress: RoundProgress, sink: Callable[[str], None]) -> str:
        """
        Copy the share text of a round to the sink.

        Args:
            round_data: The round being shared
            progress: Progress of the round; `copied_text` is set on success
            sink: Receives the text, e.g. a clipboard writer

        Returns:
            The share text
        """
        share_text = build_share_text(round_data, progress, self.config)
        try:
            sink(share_text)
        except Exception as e:
            logger.error(f"Failed to copy share text: {e}")
            return share_text

        self.generation += 1
        if self._clear_task is not None:
            self._clear_task.cancel()
        progress.copied_text = share_text

        generation = self.generation

        def clear_copied():
            if generation != self.generation:
                return
            progress.copied_text = ''
            self._clear_task = None

        self._clear_task = self.scheduler.call_later(self.config.copied_message_delay_ms, clear_copied)
        return share_text
