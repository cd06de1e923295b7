"""
Guess submission state machine.

    AwaitingGuess -> Won | CloseFirst | WonByReveal | Wrong
    CloseFirst, Wrong -> AwaitingGuess

The evaluator mutates the RoundProgress it is given and reports what
happened as a GuessOutcome.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_CONFIG, GameConfig, REVEAL_POLICY_SINGLE_STRIKE
from .exceptions import InputValidationError
from .game_state import (
    COMPLETION_REVEALED,
    COMPLETION_WON,
    MESSAGE_ALMOST,
    MESSAGE_CLOSE,
    MESSAGE_ERROR,
    MESSAGE_SUCCESS,
    RoundProgress,
)
from .scoring import ACTION_INCORRECT_GUESS, calculate_new_score, evaluate_rank, generate_hint
from .string_matching import levenshtein_distance, normalize, validate_guess

logger = logging.getLogger(__name__)

OUTCOME_REJECTED = 'rejected'
OUTCOME_REOPENED = 'reopened'
OUTCOME_WON = 'won'
OUTCOME_CLOSE_FIRST = 'closeFirst'
OUTCOME_WON_BY_REVEAL = 'wonByReveal'
OUTCOME_WRONG = 'wrong'

COMPLETING_OUTCOMES = (OUTCOME_WON, OUTCOME_WON_BY_REVEAL)

SUCCESS_MESSAGE = "You guessed it right!"
ALMOST_MESSAGE = "You're close! Off by a few letters."


@dataclass
class GuessOutcome:
    status: str
    message: str = ''
    message_type: str = ''
    distance: Optional[int] = None

    @property
    def completes_round(self) -> bool:
        return self.status in COMPLETING_OUTCOMES

    @property
    def changed_state(self) -> bool:
        return self.status not in (OUTCOME_REJECTED, OUTCOME_REOPENED)


class GuessEvaluator:
    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def submit(self, progress: RoundProgress, answer: str, raw_guess: str) -> GuessOutcome:
        """
        Evaluate a raw guess against the answer.

        Args:
            progress: Progress of the round, updated in place
            answer: The athlete's name
            raw_guess: The guess as typed

        Returns:
            What the guess did to the round
        """
        try:
            guess = validate_guess(raw_guess)
        except InputValidationError:
            return GuessOutcome(OUTCOME_REJECTED)

        normalized_answer = normalize(answer)

        # A finished round only accepts the answer again, to reopen the results
        if progress.is_completed:
            if guess == normalized_answer:
                progress.show_results = True
                return GuessOutcome(OUTCOME_REOPENED)
            return GuessOutcome(OUTCOME_REJECTED)

        # Repeating the previous wrong guess costs nothing and does nothing
        if guess != normalized_answer and progress.last_submitted_guess and guess == progress.last_submitted_guess:
            logger.debug(f"Ignoring repeated guess '{guess}'")
            return GuessOutcome(OUTCOME_REJECTED)

        progress.last_submitted_guess = guess

        if guess == normalized_answer:
            return self._win(progress)

        distance = levenshtein_distance(guess, normalized_answer)
        new_score = calculate_new_score(progress.score, ACTION_INCORRECT_GUESS, self.config)
        progress.hint = generate_hint(new_score, progress.hint, answer, self.config)
        progress.score = new_score

        if distance <= self.config.close_guess_distance:
            return self._close_guess(progress, answer, guess, distance)

        progress.incorrect_guesses += 1
        progress.message = f'Wrong guess: "{raw_guess}"'
        progress.message_type = MESSAGE_ERROR
        return GuessOutcome(OUTCOME_WRONG, progress.message, progress.message_type, distance)

    def _win(self, progress: RoundProgress) -> GuessOutcome:
        # Rank uses the score before this guess; a correct guess costs nothing
        progress.final_rank = evaluate_rank(progress.score, self.config)
        progress.completion_reason = COMPLETION_WON
        progress.hint = ''
        progress.previous_close_guess = ''
        progress.message = SUCCESS_MESSAGE
        progress.message_type = MESSAGE_SUCCESS
        progress.show_results = True
        logger.info(f"Round won with score {progress.score} and rank '{progress.final_rank}'")
        return GuessOutcome(OUTCOME_WON, progress.message, progress.message_type, 0)

    def _close_guess(self, progress: RoundProgress, answer: str, guess: str, distance: int) -> GuessOutcome:
        second_strike = bool(progress.previous_close_guess) and progress.previous_close_guess != guess
        if second_strike or self.config.reveal_policy == REVEAL_POLICY_SINGLE_STRIKE:
            progress.final_rank = evaluate_rank(progress.score, self.config)
            progress.completion_reason = COMPLETION_REVEALED
            progress.previous_close_guess = ''
            progress.message = f"Correct, you were close! Player's name: {answer}"
            progress.message_type = MESSAGE_CLOSE
            progress.show_results = True
            logger.info(f"Round won by close guess with score {progress.score}")
            return GuessOutcome(OUTCOME_WON_BY_REVEAL, progress.message, progress.message_type, distance)

        progress.previous_close_guess = guess
        progress.message = ALMOST_MESSAGE
        progress.message_type = MESSAGE_ALMOST
        return GuessOutcome(OUTCOME_CLOSE_FIRST, progress.message, progress.message_type, distance)
