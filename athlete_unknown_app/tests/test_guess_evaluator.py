from django.test import SimpleTestCase

from athlete_unknown_core.config import REVEAL_POLICY_SINGLE_STRIKE, GameConfig
from athlete_unknown_core.game_state import (
    COMPLETION_GAVE_UP,
    COMPLETION_NONE,
    COMPLETION_REVEALED,
    COMPLETION_WON,
    MESSAGE_ALMOST,
    MESSAGE_CLOSE,
    MESSAGE_ERROR,
    MESSAGE_SUCCESS,
    RoundProgress,
)
from athlete_unknown_core.guess_evaluator import (
    OUTCOME_CLOSE_FIRST,
    OUTCOME_REJECTED,
    OUTCOME_REOPENED,
    OUTCOME_WON,
    OUTCOME_WON_BY_REVEAL,
    OUTCOME_WRONG,
    GuessEvaluator,
)

ANSWER = "Babe Ruth"


class TestGuessEvaluator(SimpleTestCase):
    def setUp(self):
        self.evaluator = GuessEvaluator()
        self.progress = RoundProgress()

    def submit(self, guess):
        return self.evaluator.submit(self.progress, ANSWER, guess)

    def test_rank_uses_configured_thresholds(self):
        evaluator = GuessEvaluator(GameConfig(ranks=[(101, "Perfect"), (50, "Good")]))
        evaluator.submit(self.progress, ANSWER, "Babe Ruth")
        self.assertEqual(self.progress.final_rank, "Good")

    def test_exact_answer_wins_without_penalty(self):
        outcome = self.submit("Babe Ruth")
        self.assertEqual(outcome.status, OUTCOME_WON)
        self.assertTrue(outcome.completes_round)
        self.assertEqual(self.progress.score, 100)
        self.assertEqual(self.progress.final_rank, "Amazing")
        self.assertEqual(self.progress.completion_reason, COMPLETION_WON)
        self.assertEqual(self.progress.message_type, MESSAGE_SUCCESS)
        self.assertTrue(self.progress.show_results)

    def test_answer_matches_after_normalization(self):
        self.assertEqual(self.submit("  babe-ruth. ").status, OUTCOME_WON)

    def test_two_wrong_guesses_then_win(self):
        self.assertEqual(self.submit("Wrong 1").status, OUTCOME_WRONG)
        self.assertEqual(self.submit("Wrong 2").status, OUTCOME_WRONG)
        outcome = self.submit("Babe Ruth")

        self.assertEqual(outcome.status, OUTCOME_WON)
        self.assertEqual(self.progress.score, 96)
        self.assertEqual(self.progress.final_rank, "Amazing")
        self.assertEqual(self.progress.incorrect_guesses, 2)
        self.assertEqual(self.progress.tiles_flipped_count, 0)

    def test_rank_uses_score_before_winning_guess(self):
        self.progress.score = 90
        self.submit("Babe Ruth")
        self.assertEqual(self.progress.final_rank, "Elite")
        self.assertEqual(self.progress.score, 90)

    def test_wrong_guess_message_quotes_raw_guess(self):
        outcome = self.submit("Ty Cobb")
        self.assertEqual(outcome.message, 'Wrong guess: "Ty Cobb"')
        self.assertEqual(outcome.message_type, MESSAGE_ERROR)
        self.assertEqual(self.progress.score, 98)
        self.assertEqual(self.progress.incorrect_guesses, 1)

    def test_repeated_wrong_guess_is_free(self):
        self.submit("Mickey Mantle")
        outcome = self.submit("mickey mantle")

        self.assertEqual(outcome.status, OUTCOME_REJECTED)
        self.assertEqual(self.progress.score, 98)
        self.assertEqual(self.progress.incorrect_guesses, 1)

    def test_same_wrong_guess_counts_again_after_another_guess(self):
        self.submit("Mickey Mantle")
        self.submit("Ty Cobb")
        self.assertEqual(self.submit("Mickey Mantle").status, OUTCOME_WRONG)
        self.assertEqual(self.progress.score, 94)

    def test_empty_guess_is_rejected_without_change(self):
        before = self.progress.to_dict()
        for raw in ["", "   ", "-"]:
            self.assertEqual(self.submit(raw).status, OUTCOME_REJECTED)
        self.assertEqual(self.progress.to_dict(), before)

    def test_first_close_guess_does_not_reveal(self):
        outcome = self.submit("Babe Rut")

        self.assertEqual(outcome.status, OUTCOME_CLOSE_FIRST)
        self.assertEqual(outcome.message_type, MESSAGE_ALMOST)
        self.assertNotIn("Babe Ruth", outcome.message)
        self.assertEqual(self.progress.score, 98)
        self.assertEqual(self.progress.incorrect_guesses, 0)
        self.assertEqual(self.progress.previous_close_guess, "baberut")
        self.assertEqual(self.progress.completion_reason, COMPLETION_NONE)

    def test_second_different_close_guess_reveals(self):
        self.submit("Babe Rut")
        outcome = self.submit("Babe Rith")

        self.assertEqual(outcome.status, OUTCOME_WON_BY_REVEAL)
        self.assertEqual(outcome.message_type, MESSAGE_CLOSE)
        self.assertIn("Babe Ruth", outcome.message)
        self.assertEqual(self.progress.score, 96)
        self.assertEqual(self.progress.final_rank, "Amazing")
        self.assertEqual(self.progress.completion_reason, COMPLETION_REVEALED)
        self.assertEqual(self.progress.previous_close_guess, "")
        self.assertTrue(self.progress.is_correct)

    def test_reveal_rank_uses_score_after_penalty(self):
        self.progress.score = 96
        self.submit("Babe Rut")
        self.submit("Babe Rith")
        self.assertEqual(self.progress.score, 92)
        self.assertEqual(self.progress.final_rank, "Elite")

    def test_wrong_guess_keeps_pending_close_guess(self):
        self.submit("Babe Rut")
        self.submit("Ty Cobb")
        self.assertEqual(self.progress.previous_close_guess, "baberut")

        outcome = self.submit("Babe Rith")
        self.assertEqual(outcome.status, OUTCOME_WON_BY_REVEAL)
        self.assertEqual(self.progress.score, 94)
        self.assertEqual(self.progress.final_rank, "Elite")

    def test_single_strike_policy_reveals_on_first_close_guess(self):
        evaluator = GuessEvaluator(GameConfig(reveal_policy=REVEAL_POLICY_SINGLE_STRIKE))
        outcome = evaluator.submit(self.progress, ANSWER, "Babe Rut")
        self.assertEqual(outcome.status, OUTCOME_WON_BY_REVEAL)
        self.assertEqual(self.progress.score, 98)

    def test_hint_unlocks_below_threshold(self):
        self.progress.score = 71
        self.submit("Ty Cobb")
        self.assertEqual(self.progress.score, 69)
        self.assertEqual(self.progress.hint, "B.R")

    def test_win_clears_hint(self):
        self.progress = RoundProgress(score=60, hint="B.R", previous_close_guess="baberut")
        self.submit("Babe Ruth")
        self.assertEqual(self.progress.hint, "")
        self.assertEqual(self.progress.previous_close_guess, "")
        self.assertEqual(self.progress.final_rank, "")

    def test_completed_round_only_reopens_on_answer(self):
        self.progress = RoundProgress(score=80, completion_reason=COMPLETION_GAVE_UP)

        self.assertEqual(self.submit("Ty Cobb").status, OUTCOME_REJECTED)
        self.assertFalse(self.progress.show_results)

        outcome = self.submit("Babe Ruth")
        self.assertEqual(outcome.status, OUTCOME_REOPENED)
        self.assertFalse(outcome.changed_state)
        self.assertTrue(self.progress.show_results)
        self.assertEqual(self.progress.score, 80)
        self.assertEqual(self.progress.completion_reason, COMPLETION_GAVE_UP)
