"""Pytest configuration to make the project root importable.

The widget ships as top-level packages (``config``, ``services``,
``desktop_widget``) next to ``widget_main.py``; tests import them the same
way the entry point does.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from services.base import MemoryPreferenceStore  # noqa: E402


@pytest.fixture
def running_store():
    def _make(exit_time_millis: int, is_running: bool = True):
        return MemoryPreferenceStore({
            "flutter.is_running": is_running,
            "flutter.exit_time": exit_time_millis,
        })
    return _make
