"""Tests for key-combo registration and dispatch."""

from __future__ import annotations

import unittest

from grua.input import DEFAULT_KEY_MAP, HELP_ITEMS, KeyComboBinding, KeyComboRegistry


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_invokes_handler_for_every_combo(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_binding(
            KeyComboBinding(("j", "DOWN"), lambda: calls.append("down") or True)
        )

        self.assertTrue(registry.dispatch("j"))
        self.assertTrue(registry.dispatch("DOWN"))
        self.assertEqual(calls, ["down", "down"])

    def test_unbound_key_returns_none(self) -> None:
        registry = KeyComboRegistry()

        self.assertIsNone(registry.dispatch("x"))

    def test_later_binding_overrides_earlier(self) -> None:
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("g",), lambda: "first"),
            KeyComboBinding(("g",), lambda: "second"),
        )

        self.assertEqual(registry.dispatch("g"), "second")

    def test_default_key_map_covers_global_keys(self) -> None:
        self.assertIn("q", DEFAULT_KEY_MAP.quit)
        self.assertIn("CTRL_C", DEFAULT_KEY_MAP.quit)
        self.assertIn("TAB", DEFAULT_KEY_MAP.switch_pane)
        self.assertEqual(DEFAULT_KEY_MAP.help, ("?",))
        self.assertTrue(any("Quit" in desc for _keys, desc in HELP_ITEMS))


if __name__ == "__main__":
    unittest.main()
