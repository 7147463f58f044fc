from __future__ import annotations

from dataclasses import dataclass

from PySide6 import QtCore

from motutor.chem.configuration import CheckMode
from motutor.chem.molecules import DEFAULT_MOLECULE_ID, molecule_ids
from motutor.chem.placement import CyclePolicy
from motutor.hints import DEFAULT_MODEL, DEFAULT_TEMPERATURE, DEFAULT_TIMEOUT_S, api_key_from_env

ORGANIZATION = "MOTutor"
APPLICATION = "MOTutor"


@dataclass
class TutorSettings:
    cycle_policy: CyclePolicy = CyclePolicy.RESET
    check_mode: CheckMode = CheckMode.RULES
    hint_model: str = DEFAULT_MODEL
    hint_timeout_s: float = DEFAULT_TIMEOUT_S
    hint_temperature: float = DEFAULT_TEMPERATURE
    api_key: str | None = None
    last_molecule: str = DEFAULT_MOLECULE_ID


def open_settings() -> QtCore.QSettings:
    return QtCore.QSettings(ORGANIZATION, APPLICATION)


def _enum_value(enum_cls, raw, default):
    try:
        return enum_cls(str(raw))
    except ValueError:
        return default


def _float_value(raw, default: float, allow_zero: bool = False) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if value > 0 or (allow_zero and value == 0):
        return value
    return default


def load_settings(store=None) -> TutorSettings:
    """Read preferences from a QSettings-like store (anything with ``value(key, default)``)."""
    store = open_settings() if store is None else store
    defaults = TutorSettings()
    api_key = str(store.value("hint/api_key", "") or "").strip() or api_key_from_env()
    last_molecule = str(store.value("session/last_molecule", defaults.last_molecule) or "")
    if last_molecule not in molecule_ids():
        last_molecule = defaults.last_molecule
    return TutorSettings(
        cycle_policy=_enum_value(CyclePolicy, store.value("session/cycle_policy", defaults.cycle_policy.value), defaults.cycle_policy),
        check_mode=_enum_value(CheckMode, store.value("session/check_mode", defaults.check_mode.value), defaults.check_mode),
        hint_model=str(store.value("hint/model", defaults.hint_model) or defaults.hint_model),
        hint_timeout_s=_float_value(store.value("hint/timeout_s", defaults.hint_timeout_s), defaults.hint_timeout_s),
        hint_temperature=_float_value(
            store.value("hint/temperature", defaults.hint_temperature), defaults.hint_temperature, allow_zero=True
        ),
        api_key=api_key,
        last_molecule=last_molecule,
    )


def save_settings(settings: TutorSettings, store=None) -> None:
    store = open_settings() if store is None else store
    store.setValue("session/cycle_policy", settings.cycle_policy.value)
    store.setValue("session/check_mode", settings.check_mode.value)
    store.setValue("session/last_molecule", settings.last_molecule)
    store.setValue("hint/model", settings.hint_model)
    store.setValue("hint/timeout_s", settings.hint_timeout_s)
    store.setValue("hint/temperature", settings.hint_temperature)
    # The key stays out of the store when it came from the environment.
    if settings.api_key and settings.api_key != api_key_from_env():
        store.setValue("hint/api_key", settings.api_key)
