"""Tests for the read-only JSON config and CLI override merging."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from grua import config


class ReviewConfigTests(unittest.TestCase):
    def _load(self, payload, **overrides) -> config.ReviewConfig:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            if payload is not None:
                text = payload if isinstance(payload, str) else json.dumps(payload)
                config_path.write_text(text, encoding="utf-8")
            with mock.patch("grua.config.CONFIG_PATH", config_path):
                return config.load_review_config(**overrides)

    def test_missing_file_gives_defaults(self) -> None:
        loaded = self._load(None)

        self.assertEqual(loaded, config.ReviewConfig())
        self.assertEqual(loaded.refresh_seconds, 10.0)
        self.assertTrue(loaded.show_untracked)

    def test_malformed_file_gives_defaults(self) -> None:
        with self.assertLogs("grua.config", level="WARNING"):
            loaded = self._load("{not json")

        self.assertEqual(loaded, config.ReviewConfig())

    def test_non_object_json_is_ignored(self) -> None:
        self.assertEqual(self._load([1, 2, 3]), config.ReviewConfig())

    def test_file_values_are_used(self) -> None:
        loaded = self._load(
            {
                "theme": "classic",
                "style": "native",
                "refresh_seconds": 3,
                "extensions": ["py", " .go ", 7, ""],
                "show_untracked": False,
            }
        )

        self.assertEqual(loaded.theme, "classic")
        self.assertEqual(loaded.style, "native")
        self.assertEqual(loaded.refresh_seconds, 3.0)
        self.assertEqual(loaded.extensions, ("py", ".go"))
        self.assertFalse(loaded.show_untracked)

    def test_overrides_win_over_file(self) -> None:
        loaded = self._load(
            {"style": "native", "refresh_seconds": 3, "show_untracked": False},
            style="monokai",
            refresh_seconds=7.5,
            show_untracked=True,
        )

        self.assertEqual(loaded.style, "monokai")
        self.assertEqual(loaded.refresh_seconds, 7.5)
        self.assertTrue(loaded.show_untracked)

    def test_invalid_refresh_values_fall_back(self) -> None:
        self.assertEqual(self._load({"refresh_seconds": True}).refresh_seconds, 10.0)
        self.assertEqual(self._load({"refresh_seconds": -1}).refresh_seconds, 10.0)
        self.assertEqual(self._load({"refresh_seconds": 0.1}).refresh_seconds, config.MIN_REFRESH_SECONDS)


if __name__ == "__main__":
    unittest.main()
