import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

_TRUE_TEXT = {"1", "true", "yes", "on"}


def _convert(value, wanted):
    """Mimic QSettings' ``type=`` conversion for the types the app asks for."""
    if wanted is None or value is None:
        return value
    if wanted is bool:
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_TEXT
        return bool(value)
    return wanted(value)


class MemorySettings:
    """QSettings look-alike; instances with the same org/app share storage."""

    _stores = {}

    def __init__(self, org="MRSTraders", app="PaddyCalculator"):
        self._values = MemorySettings._stores.setdefault((org, app), {})

    def value(self, key, defaultValue=None, type=None):  # noqa: A002 - mirrors QSettings
        return _convert(self._values.get(key, defaultValue), type)

    def setValue(self, key, value):
        self._values[key] = value

    def remove(self, key):
        self._values.pop(key, None)

    def contains(self, key):
        return key in self._values

    def sync(self):
        return None

    @classmethod
    def reset(cls):
        cls._stores.clear()


class FailingSettings:
    """Settings backend that fails on every access."""

    def _fail(self, *args, **kwargs):
        raise OSError("settings unavailable")

    value = setValue = remove = sync = _fail


@pytest.fixture(scope="session")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PyQt5.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])


@pytest.fixture()
def settings_stub(monkeypatch):
    """Route ``get_app_settings()`` to in-memory storage."""
    MemorySettings.reset()
    monkeypatch.setattr("paddycalc.infrastructure.settings.QSettings", MemorySettings)
    yield MemorySettings
    MemorySettings.reset()


@pytest.fixture()
def memory_settings():
    MemorySettings.reset()
    yield MemorySettings()
    MemorySettings.reset()


@pytest.fixture()
def broken_settings():
    return FailingSettings()
