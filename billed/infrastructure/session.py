"""Access to the signed-in user persisted in session storage."""
from __future__ import annotations

from typing import Mapping, Protocol

from billed.core.schema import User

USER_KEY = "user"


class SessionAccessor(Protocol):
    """Contract for reading the current user."""

    def current_user(self) -> User:
        """Return the user the form is filled for."""


class LocalStorageSession:
    """Reads the ``user`` JSON entry of a browser-style key/value storage."""

    def __init__(self, storage: Mapping[str, str], *, key: str = USER_KEY) -> None:
        self._storage = storage
        self._key = key

    def current_user(self) -> User:
        raw = self._storage.get(self._key)
        if raw is None:
            raise KeyError(f"no {self._key!r} entry in session storage")
        return User.model_validate_json(raw)
