"""Shared fixtures for the dashboard tests."""

from __future__ import annotations

import pytest

from tui_hrdash.models import UserRecord
from tui_hrdash.store import InMemoryTaskStore
from tui_hrdash.users import SettingsUserDirectory


class FakeTimer:
    def __init__(self, delay, callback) -> None:
        self.delay = delay
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True

    def fire(self) -> None:
        assert not self.stopped
        self.callback()


class TimerFactory:
    """Records scheduled timers instead of running them."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, delay, callback) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def notify(self, message: str, *, severity: str = "information") -> None:
        self.messages.append((message, severity))

    @property
    def severities(self) -> list[str]:
        return [s for _, s in self.messages]


@pytest.fixture
def timers() -> TimerFactory:
    return TimerFactory()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def users() -> SettingsUserDirectory:
    return SettingsUserDirectory(
        [
            UserRecord("ana@corp.test", "Ana Ruiz", "Human Resources"),
            UserRecord("ben@corp.test", "Ben Okafor", "Finance"),
            UserRecord("cy@corp.test", "", "Human Resources"),
        ],
        current="ana@corp.test",
    )


@pytest.fixture
def store() -> InMemoryTaskStore:
    return InMemoryTaskStore()
