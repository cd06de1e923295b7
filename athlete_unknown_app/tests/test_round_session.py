from datetime import date
from unittest.mock import Mock

from django.test import SimpleTestCase

from athlete_unknown_core.config import GUEST_STATS_KEY
from athlete_unknown_core.exceptions import DataFetchError, SubmissionError
from athlete_unknown_core.game_state import COMPLETION_GAVE_UP, COMPLETION_WON, RoundProgress
from athlete_unknown_core.guess_evaluator import OUTCOME_REOPENED, OUTCOME_WON
from athlete_unknown_core.result_submitter import ResultSubmitter
from athlete_unknown_core.round_session import (
    START_FRESH,
    START_HISTORY,
    START_RESTORED,
    STATUS_ERROR,
    STATUS_READY,
    RoundSession,
    RoundSessionManager,
)
from athlete_unknown_core.storage import InMemoryStore, get_current_session_key, get_game_submission_key, get_history_key

from .factories import PLAY_DATE, FailingStore, make_round

BIO = 0
PHOTO = 8


class TestRoundSession(SimpleTestCase):
    def setUp(self):
        self.store = InMemoryStore()
        self.round = make_round()

    def new_session(self, round_data=None, submitter=None):
        session = RoundSession(round_data or self.round, self.store, submitter=submitter)
        session.start()
        return session

    def test_fresh_start(self):
        session = self.new_session()
        self.assertEqual(session.origin, START_FRESH)
        self.assertEqual(session.progress.to_dict(), RoundProgress().to_dict())

    def test_every_change_is_persisted(self):
        session = self.new_session()
        session.click_tile(BIO)

        record = self.store.get_json(get_current_session_key("baseball", PLAY_DATE))
        self.assertEqual(record["playerName"], "Babe Ruth")
        self.assertEqual(record["progress"]["score"], 97)

        session.submit_guess("Ty Cobb")
        record = self.store.get_json(get_current_session_key("baseball", PLAY_DATE))
        self.assertEqual(record["progress"]["score"], 95)

    def test_restore_same_athlete(self):
        session = self.new_session()
        session.click_tile(BIO)
        session.submit_guess("Ty Cobb")
        session.submit_guess("Babe Rut")

        restored = self.new_session()
        self.assertEqual(restored.origin, START_RESTORED)
        self.assertEqual(restored.progress.to_dict(), session.progress.to_dict())

        # The pending close guess survives the reload
        self.assertEqual(restored.submit_guess("Babe Rith").status, "wonByReveal")

    def test_restore_other_athlete_starts_fresh(self):
        session = self.new_session()
        session.click_tile(PHOTO)
        session.submit_guess("Ty Cobb")

        other = self.new_session(make_round(name="Ty Cobb"))
        self.assertEqual(other.origin, START_FRESH)
        self.assertEqual(other.progress.to_dict(), RoundProgress().to_dict())
        self.assertIsNone(self.store.get(get_current_session_key("baseball", PLAY_DATE)))

    def test_corrupt_record_starts_fresh(self):
        self.store.set(get_current_session_key("baseball", PLAY_DATE), "{broken")
        self.assertEqual(self.new_session().origin, START_FRESH)

    def test_completed_round_moves_to_history(self):
        session = self.new_session()
        session.click_tile(BIO)
        session.submit_guess("Babe Ruth")

        self.assertIsNone(self.store.get(get_current_session_key("baseball", PLAY_DATE)))
        history = self.store.get_json(get_history_key("baseball", PLAY_DATE))
        self.assertTrue(history["completed"])
        self.assertEqual(history["progress"]["completion_reason"], COMPLETION_WON)

        reloaded = self.new_session()
        self.assertEqual(reloaded.origin, START_HISTORY)
        self.assertTrue(reloaded.progress.is_completed)
        self.assertEqual(reloaded.progress.score, 97)

    def test_give_up(self):
        session = self.new_session()
        session.click_tile(BIO)

        self.assertTrue(session.give_up())
        self.assertEqual(session.progress.completion_reason, COMPLETION_GAVE_UP)
        self.assertEqual(session.progress.final_rank, "")
        self.assertEqual(session.progress.score, 97)
        self.assertTrue(session.progress.show_results)
        self.assertFalse(session.give_up())

        self.assertFalse(self.store.get_json(get_history_key("baseball", PLAY_DATE))["completed"])
        self.assertEqual(session.submit_guess("babe ruth").status, OUTCOME_REOPENED)

    def test_completion_submits_result(self):
        transport = Mock()
        submitter = ResultSubmitter(transport, self.store, today=lambda: date(2025, 6, 1))
        session = self.new_session(submitter=submitter)

        session.click_tile(BIO)
        self.assertEqual(session.submit_guess("Babe Ruth").status, OUTCOME_WON)
        session.submit_guess("Babe Ruth")
        session.click_tile(PHOTO)

        self.assertEqual(transport.call_count, 1)
        payload = transport.call_args[0][2]
        self.assertEqual(payload.flipped_tiles, ["bio"])
        self.assertEqual(payload.score, 97)

    def test_restored_round_retries_failed_submission(self):
        failing = Mock(side_effect=SubmissionError("HTTP 503"))
        session = self.new_session(submitter=ResultSubmitter(failing, self.store, today=lambda: date(2025, 6, 1)))
        session.submit_guess("Babe Ruth")
        self.assertEqual(failing.call_count, 1)
        self.assertIsNone(self.store.get(get_game_submission_key("baseball", PLAY_DATE)))

        working = Mock()
        restored = self.new_session(submitter=ResultSubmitter(working, self.store, today=lambda: date(2025, 6, 1)))
        self.assertEqual(restored.origin, START_HISTORY)
        self.assertEqual(working.call_count, 1)
        self.assertEqual(working.call_args[0][2].score, 100)
        self.assertIsNotNone(self.store.get(get_game_submission_key("baseball", PLAY_DATE)))

        self.new_session(submitter=ResultSubmitter(working, self.store, today=lambda: date(2025, 6, 1)))
        self.assertEqual(working.call_count, 1)

    def test_completion_updates_guest_stats(self):
        session = self.new_session()
        session.submit_guess("Babe Ruth")

        stats = self.store.get_json(GUEST_STATS_KEY)
        baseball = next(s for s in stats["sports"] if s["sport"] == "baseball")
        self.assertEqual(baseball["totalPlays"], 1)
        self.assertEqual(baseball["highestScore"], 100)

    def test_store_failures_do_not_stop_the_game(self):
        session = RoundSession(self.round, FailingStore())
        session.start()

        session.click_tile(BIO)
        session.submit_guess("Ty Cobb")
        self.assertEqual(session.submit_guess("Babe Ruth").status, OUTCOME_WON)
        self.assertEqual(session.progress.score, 95)
        self.assertFalse(session.persist())

    def test_snapshot_hides_unflipped_facts(self):
        session = self.new_session()
        session.click_tile(BIO)
        snapshot = session.snapshot()

        self.assertEqual(snapshot["score"], 97)
        self.assertEqual(snapshot["sportEmoji"], "⚾")
        self.assertEqual(snapshot["tiles"][0]["fact"], "Born in Baltimore, Maryland")
        self.assertTrue(all(tile["fact"] is None for tile in snapshot["tiles"][1:]))
        self.assertIsNone(snapshot["answer"])

        session.give_up()
        self.assertEqual(session.snapshot()["answer"], "Babe Ruth")


class TestRoundSessionManager(SimpleTestCase):
    def setUp(self):
        self.store = InMemoryStore()
        self.fetch_round = Mock(return_value=make_round())
        self.manager = RoundSessionManager(self.fetch_round, self.store)

    def test_load(self):
        session = self.manager.load("baseball", PLAY_DATE)
        self.assertEqual(self.manager.status, STATUS_READY)
        self.assertIs(self.manager.current, session)
        self.fetch_round.assert_called_once_with("baseball", PLAY_DATE)

    def test_fetch_for_inactive_key_is_discarded(self):
        baseball_key = self.manager.begin_fetch("baseball", PLAY_DATE)
        self.manager.begin_fetch("basketball", PLAY_DATE)

        self.assertIsNone(self.manager.complete_fetch(baseball_key, make_round()))
        self.assertEqual(self.manager.sessions, {})

    def test_refetch_keeps_progress(self):
        session = self.manager.load("baseball", PLAY_DATE)
        session.click_tile(BIO)

        again = self.manager.load("baseball", PLAY_DATE)
        self.assertIs(again, session)
        self.assertEqual(again.progress.score, 97)

    def test_fetch_error_needs_manual_retry(self):
        self.fetch_round.side_effect = DataFetchError("HTTP 503")
        with self.assertRaises(DataFetchError):
            self.manager.load("baseball", PLAY_DATE)
        self.assertEqual(self.manager.status, STATUS_ERROR)
        self.assertIn("HTTP 503", self.manager.error)
        self.assertEqual(self.fetch_round.call_count, 1)

        self.fetch_round.side_effect = None
        session = self.manager.retry()
        self.assertEqual(self.manager.status, STATUS_READY)
        self.assertEqual(session.round.answer, "Babe Ruth")

    def test_clear_all_sessions(self):
        self.manager.load("baseball", PLAY_DATE).click_tile(BIO)
        self.fetch_round.return_value = make_round(sport="football", name="Tom Brady")
        finished = self.manager.load("football", PLAY_DATE)
        finished.submit_guess("Tom Brady")

        self.assertEqual(self.manager.clear_all_sessions(), 1)
        self.assertIsNone(self.store.get(get_current_session_key("baseball", PLAY_DATE)))
        self.assertIsNotNone(self.store.get(get_history_key("football", PLAY_DATE)))
        self.assertIsNone(self.manager.current)
