# tests/conftest.py
import os
import sys

import pytest

src_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from saybeat.utilities.logger import GameLogger, LogLevel


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep test output readable: only warnings and errors reach the console."""
    previous = GameLogger.LEVEL
    GameLogger.set_level(LogLevel.WARNING)
    yield
    GameLogger.set_level(previous)
