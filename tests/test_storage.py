import json
import tempfile
import unittest
from pathlib import Path

from falling_blocks.game.exceptions import CorruptHighScoreError
from falling_blocks.game.storage import (
    HIGH_SCORE_KEY,
    JsonHighScoreStore,
    MemoryHighScoreStore,
    parse_high_score,
)


class TestParseHighScore(unittest.TestCase):

    def test_valid_values(self):
        self.assertEqual(parse_high_score(0), 0)
        self.assertEqual(parse_high_score(1500), 1500)
        self.assertEqual(parse_high_score(" 42 "), 42)

    def test_corrupt_values(self):
        for raw in ["abc", "-5", "+5", "", "\u00b2", "\u0663", -5, 3.5, True, None, [1]]:
            with self.assertRaises(CorruptHighScoreError, msg=repr(raw)):
                parse_high_score(raw)

    def test_corrupt_error_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_high_score("nope")


class TestMemoryHighScoreStore(unittest.TestCase):

    def test_get_set(self):
        store = MemoryHighScoreStore()
        self.assertEqual(store.get(), 0)
        store.set(300)
        self.assertEqual(store.get(), 300)


class TestJsonHighScoreStore(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.path = self.dir / "scores" / "high_score.json"

    def tearDown(self):
        self._tmp.cleanup()

    def _write(self, text):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def test_missing_file_reads_zero(self):
        self.assertEqual(JsonHighScoreStore(self.path).get(), 0)

    def test_set_persists_under_key(self):
        JsonHighScoreStore(self.path).set(1200)
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(data, {HIGH_SCORE_KEY: 1200})
        self.assertEqual(JsonHighScoreStore(self.path).get(), 1200)

    def test_string_value_is_accepted(self):
        self._write(json.dumps({HIGH_SCORE_KEY: "700"}))
        self.assertEqual(JsonHighScoreStore(self.path).get(), 700)

    def test_corrupt_values_fall_back_to_zero(self):
        for text in ["{not json", json.dumps({HIGH_SCORE_KEY: "abc"}),
                     json.dumps({HIGH_SCORE_KEY: -3}), json.dumps({HIGH_SCORE_KEY: "\u00b2"}),
                     json.dumps([1, 2]),
                     json.dumps({"other": 5})]:
            self._write(text)
            store = JsonHighScoreStore(self.path)
            self.assertEqual(store.get(), 0, text)

    def test_corrupt_value_is_logged(self):
        self._write(json.dumps({HIGH_SCORE_KEY: "abc"}))
        with self.assertLogs("falling_blocks.game.storage", level="WARNING"):
            JsonHighScoreStore(self.path).get()

    def test_non_ascii_digits_read_as_zero_once(self):
        self._write(json.dumps({HIGH_SCORE_KEY: "²"}))
        store = JsonHighScoreStore(self.path)
        with self.assertLogs("falling_blocks.game.storage", level="WARNING") as logs:
            self.assertEqual(store.get(), 0)
            self.assertEqual(store.get(), 0)
        self.assertEqual(len(logs.records), 1)

    def test_write_failure_keeps_value_in_memory(self):
        # The target path is a directory, so writing fails.
        store = JsonHighScoreStore(self.dir)
        with self.assertLogs("falling_blocks.game.storage", level="WARNING"):
            store.set(900)
        self.assertEqual(store.get(), 900)


if __name__ == '__main__':
    unittest.main()
