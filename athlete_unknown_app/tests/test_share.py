from django.test import SimpleTestCase

from athlete_unknown_core.game_state import RoundProgress
from athlete_unknown_core.scheduler import TaskScheduler
from athlete_unknown_core.share import ShareController, build_share_text

from .factories import make_round


class TestShareText(SimpleTestCase):
    def test_grid_and_score(self):
        progress = RoundProgress(score=91, flipped_tiles=["bio", "photo"], tiles_flipped_count=2)
        text = build_share_text(make_round(), progress)

        self.assertEqual(
            text,
            "Athlete Unknown Baseball #12\n"
            "🟨🟦🟦\n"
            "🟦🟦🟦\n"
            "🟦🟦🟨\n"
            "Score: 91",
        )

    def test_round_number_defaults_to_one(self):
        text = build_share_text(make_round(round_id="daily"), RoundProgress())
        self.assertTrue(text.startswith("Athlete Unknown Baseball #1\n"))

    def test_grid_follows_tile_order_not_flip_order(self):
        progress = RoundProgress(flipped_tiles=["careerStats", "playerInformation"])
        lines = build_share_text(make_round(), progress).split("\n")
        self.assertEqual(lines[1], "🟦🟨🟦")
        self.assertEqual(lines[3], "🟨🟦🟦")


class TestShareController(SimpleTestCase):
    def setUp(self):
        self.scheduler = TaskScheduler()
        self.controller = ShareController(scheduler=self.scheduler)
        self.progress = RoundProgress(score=100)
        self.copied = []

    def test_copied_text_clears_after_delay(self):
        text = self.controller.share(make_round(), self.progress, self.copied.append)

        self.assertEqual(self.copied, [text])
        self.assertEqual(self.progress.copied_text, text)
        self.scheduler.advance(2999)
        self.assertEqual(self.progress.copied_text, text)
        self.scheduler.advance(1)
        self.assertEqual(self.progress.copied_text, "")

    def test_sharing_again_restarts_the_banner(self):
        self.controller.share(make_round(), self.progress, self.copied.append)
        self.scheduler.advance(2000)
        self.controller.share(make_round(), self.progress, self.copied.append)

        self.scheduler.advance(1000)
        self.assertNotEqual(self.progress.copied_text, "")
        self.scheduler.advance(2000)
        self.assertEqual(self.progress.copied_text, "")

    def test_failing_sink(self):
        def broken_clipboard(text):
            raise OSError("clipboard unavailable")

        text = self.controller.share(make_round(), self.progress, broken_clipboard)
        self.assertIn("Score: 100", text)
        self.assertEqual(self.progress.copied_text, "")
        self.assertEqual(self.scheduler.pending_count, 0)
