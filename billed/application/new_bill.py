"""Controller behind the new-bill form.

Two events drive it: a file being picked in the receipt input and the form
being submitted.  Picking an image uploads it straight away (create phase)
so that the identifiers are known by the time the form is submitted, and
submitting persists the full report on that same entity (update phase).
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Coroutine, Mapping

from billed.core.form_fields import bare_identifier, build_bill
from billed.core.logging import get_logger
from billed.core.paths import BILLS_PATH
from billed.core.schema import BillRecord, CreatedBill
from billed.core.validation import RejectedFile, validate_attachment
from billed.domain import DraftBill, FileInput, FormState, MultipartPayload, SelectedFile
from billed.infrastructure import SessionAccessor, StoreClient

logger = get_logger(__name__)

BILLS_RESOURCE = "bills"


class NewBillController:
    """Coordinates the receipt upload and the submission of one expense report."""

    def __init__(
        self,
        *,
        store: StoreClient,
        session: SessionAccessor,
        navigate: Callable[[str], None],
        alert: Callable[[str], None],
    ) -> None:
        self._store = store
        self._session = session
        self._navigate = navigate
        self._alert = alert
        self._draft = DraftBill()
        self._state = FormState.EMPTY
        self._attempt = 0
        self._uploading = False
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def draft(self) -> DraftBill:
        return self._draft

    @property
    def file_name(self) -> str | None:
        return self._draft.file_name

    @property
    def file_url(self) -> str | None:
        return self._draft.file_url

    @property
    def bill_id(self) -> str | None:
        return self._draft.bill_id

    @property
    def state(self) -> FormState:
        return self._state

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _settled_state(self) -> FormState:
        if self._uploading:
            return FormState.UPLOADING
        return FormState.UPLOADED if self._draft.is_uploaded else FormState.EMPTY

    def _email(self) -> str:
        return self._session.current_user().email

    # ------------------------------------------------------------------
    # file selection
    # ------------------------------------------------------------------
    def handle_change_file(self, file_input: FileInput) -> asyncio.Task[None] | None:
        """React to a change of the receipt input.

        Returns the upload task when the file was accepted, ``None`` when the
        selection was empty or rejected.
        """

        if not file_input.files:
            return None

        result = validate_attachment(file_input.files[0])
        if isinstance(result, RejectedFile):
            logger.info("Rejected attachment %r", result.file.name)
            self._alert(result.message)
            file_input.clear()
            return None

        return self._spawn(self.on_file_accepted(result.file))

    async def on_file_accepted(self, file: SelectedFile) -> None:
        self._attempt += 1
        attempt = self._attempt
        self._uploading = True
        if self._state is not FormState.SUBMITTING:
            self._state = FormState.UPLOADING

        payload = MultipartPayload(fields={"email": self._email()}, files={"file": file})
        try:
            response = await self._store.resource(BILLS_RESOURCE).create(payload)
            created = CreatedBill.model_validate(response)
        except Exception:
            if attempt == self._attempt:
                self._uploading = False
                if self._state is FormState.UPLOADING:
                    self._state = self._settled_state()
            logger.exception("Upload of %r failed", file.name)
            return

        if attempt != self._attempt:
            logger.debug("Discarding upload of %r superseded by a later selection", file.name)
            return

        self._draft = DraftBill(
            file_name=file.name,
            file_url=created.file_url,
            bill_id=bare_identifier(created.key),
        )
        self._uploading = False
        if self._state is FormState.UPLOADING:
            self._state = FormState.UPLOADED
        logger.info("Uploaded %r as bill %s", file.name, self._draft.bill_id)

    # ------------------------------------------------------------------
    # submission
    # ------------------------------------------------------------------
    def handle_submit(self, form: Mapping[str, Any]) -> asyncio.Task[None]:
        """Build the report from ``form`` and send it to the store."""

        bill = build_bill(form, email=self._email(), draft=self._draft)
        return self._spawn(self.update_bill(bill))

    async def update_bill(self, bill: BillRecord) -> None:
        self._state = FormState.SUBMITTING
        try:
            await self._store.resource(BILLS_RESOURCE).update(
                bill.model_dump(by_alias=True),
                selector=self._draft.bill_id,
            )
        except Exception:
            if self._state is FormState.SUBMITTING:
                self._state = self._settled_state()
            logger.exception("Submission of bill %s failed", self._draft.bill_id)
            return

        self._state = FormState.DONE
        logger.info("Submitted bill %s", self._draft.bill_id)
        self._navigate(BILLS_PATH)
