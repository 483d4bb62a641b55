"""User directory interface and a settings-backed implementation."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

from tui_hrdash.models import UserRecord


class UserDirectory(Protocol):
    def resolve(self, identifier: str) -> str:
        """Display name for *identifier* (the identifier itself if unknown)."""
        ...

    def current_user(self) -> str | None:
        ...

    def all_users(self) -> list[UserRecord]:
        ...

    def departments(self) -> list[str]:
        ...


class SettingsUserDirectory:
    """Directory built from the ``users`` list in settings.yaml."""

    def __init__(self, users: Iterable[UserRecord] = (), current: str | None = None) -> None:
        self._users: dict[str, UserRecord] = {u.email: u for u in users}
        self._current = current or None

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> SettingsUserDirectory:
        users: list[UserRecord] = []
        raw = settings.get("users", [])
        if isinstance(raw, list):
            for entry in raw:
                if isinstance(entry, dict) and entry.get("email"):
                    users.append(
                        UserRecord(
                            email=str(entry["email"]),
                            name=str(entry.get("name", "")),
                            department=str(entry.get("department", "")),
                        )
                    )
        current = settings.get("current_user")
        return cls(users, str(current) if current else None)

    def resolve(self, identifier: str) -> str:
        user = self._users.get(identifier)
        return user.display_name if user else identifier

    def current_user(self) -> str | None:
        return self._current

    def sign_in(self, identifier: str | None) -> None:
        self._current = identifier or None

    def all_users(self) -> list[UserRecord]:
        return list(self._users.values())

    def departments(self) -> list[str]:
        """Distinct non-empty departments, in first-seen order."""
        seen: dict[str, None] = {}
        for user in self._users.values():
            if user.department:
                seen.setdefault(user.department, None)
        return list(seen)
