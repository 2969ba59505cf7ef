"""Shared test configuration and fixtures."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from smart_paste.config import PasteSettings

# Load .env from project root for all tests
root = Path(__file__).parent.parent.resolve()
load_dotenv(root / ".env")


class FakeHost:
    """Document host that records replacements; *accepts* controls can_insert."""

    def __init__(self, accepts: bool = True):
        self.accepts = accepts
        self.checked: list[list] = []
        self.inserted: list[list] = []

    def can_insert(self, nodes):
        self.checked.append(nodes)
        return self.accepts

    def replace_selection(self, nodes):
        self.inserted.append(nodes)


class RecordingNotifier:
    """Notification sink that keeps (message, severity) pairs."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def __call__(self, message, severity):
        self.messages.append((message, severity))

    @property
    def severities(self) -> list[str]:
        return [severity for _, severity in self.messages]


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def settings():
    """Default settings, independent of any SMART_PASTE_* variables in the environment."""
    return PasteSettings()
