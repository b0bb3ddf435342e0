"""Registry of open new-bill forms for the HTTP binding layer."""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any

from billed.core.schema import User
from billed.infrastructure import LocalStorageSession, StoreClient, get_store_client
from billed.infrastructure.session import USER_KEY

from .new_bill import NewBillController


@dataclass
class FormSession:
    """One open form: its controller plus what the page would have shown."""

    form_id: str
    controller: NewBillController
    alerts: list[str] = field(default_factory=list)
    redirect: str | None = None

    def snapshot(self) -> dict[str, Any]:
        controller = self.controller
        return {
            "form_id": self.form_id,
            "state": controller.state.value,
            "fileName": controller.file_name,
            "fileUrl": controller.file_url,
            "billId": controller.bill_id,
            "alerts": list(self.alerts),
            "redirect": self.redirect,
        }


class FormSessionService:
    """Opens, looks up and closes form sessions."""

    def __init__(self, store: StoreClient | None = None) -> None:
        self._store = store
        self._sessions: dict[str, FormSession] = {}
        self._counter = itertools.count(1)

    def open(self, user: User) -> FormSession:
        form_id = f"form-{next(self._counter):05d}"
        storage = {USER_KEY: user.model_dump_json()}
        alerts: list[str] = []
        session: FormSession

        def navigate(path: str) -> None:
            session.redirect = path

        controller = NewBillController(
            store=self._store or get_store_client(),
            session=LocalStorageSession(storage),
            navigate=navigate,
            alert=alerts.append,
        )
        session = FormSession(form_id=form_id, controller=controller, alerts=alerts)
        self._sessions[form_id] = session
        return session

    def get(self, form_id: str) -> FormSession | None:
        return self._sessions.get(form_id)

    def close(self, form_id: str) -> None:
        self._sessions.pop(form_id, None)

    def reset(self) -> None:
        self._sessions.clear()
        self._counter = itertools.count(1)


_service = FormSessionService()


def get_form_session_service() -> FormSessionService:
    """Return the singleton form session service for the process."""

    return _service


def reset_form_sessions() -> None:
    """Drop every open form (used in tests)."""

    _service.reset()
