from __future__ import annotations

import sys
import unittest
from pathlib import Path
from unittest import mock

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from motutor.chem.configuration import CheckMode
from motutor.chem.placement import CyclePolicy
from motutor.settings import TutorSettings, load_settings, save_settings


class _MemoryStore:
    """Stands in for QSettings; values come back as strings like an INI backend."""

    def __init__(self, values: dict | None = None) -> None:
        self.values = dict(values or {})

    def value(self, key: str, default=None):
        return self.values.get(key, default)

    def setValue(self, key: str, value) -> None:
        self.values[key] = str(value)


class SettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        with mock.patch.dict("os.environ", {}, clear=True):
            settings = load_settings(_MemoryStore())
        self.assertEqual(settings, TutorSettings())
        self.assertIsNone(settings.api_key)

    def test_reads_typed_values(self) -> None:
        store = _MemoryStore(
            {
                "session/cycle_policy": "step_down",
                "session/check_mode": "exact",
                "session/last_molecule": "B2",
                "hint/timeout_s": "2.5",
                "hint/temperature": "0",
                "hint/api_key": "stored-key",
            }
        )
        settings = load_settings(store)
        self.assertEqual(settings.cycle_policy, CyclePolicy.STEP_DOWN)
        self.assertEqual(settings.check_mode, CheckMode.EXACT)
        self.assertEqual(settings.last_molecule, "B2")
        self.assertEqual(settings.hint_timeout_s, 2.5)
        self.assertEqual(settings.hint_temperature, 0.0)
        self.assertEqual(settings.api_key, "stored-key")

    def test_bad_values_fall_back(self) -> None:
        store = _MemoryStore(
            {
                "session/cycle_policy": "sideways",
                "session/check_mode": "strict",
                "session/last_molecule": "Xe2",
                "hint/timeout_s": "-4",
                "hint/temperature": "warm",
            }
        )
        with mock.patch.dict("os.environ", {}, clear=True):
            settings = load_settings(store)
        self.assertEqual(settings, TutorSettings())

    def test_api_key_from_environment(self) -> None:
        with mock.patch.dict("os.environ", {"API_KEY": "env-key"}, clear=True):
            settings = load_settings(_MemoryStore())
            self.assertEqual(settings.api_key, "env-key")
            store = _MemoryStore()
            save_settings(settings, store)
        self.assertNotIn("hint/api_key", store.values)

    def test_save_then_load(self) -> None:
        store = _MemoryStore()
        original = TutorSettings(
            cycle_policy=CyclePolicy.STEP_DOWN,
            check_mode=CheckMode.EXACT,
            hint_timeout_s=4.0,
            api_key="typed-key",
            last_molecule="N2-",
        )
        with mock.patch.dict("os.environ", {}, clear=True):
            save_settings(original, store)
            restored = load_settings(store)
        self.assertEqual(restored, original)


if __name__ == "__main__":
    unittest.main()
