from __future__ import annotations

from pathlib import PureWindowsPath
from typing import Any

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import ValidationError

from billed.application import FormSession, get_form_session_service
from billed.core.form_fields import FIELD_IDS
from billed.core.schema import User
from billed.domain import FileInput, FormState, SelectedFile

router = APIRouter(prefix="/new-bill", tags=["new-bill"])


def _get_form(form_id: str) -> FormSession:
    form = get_form_session_service().get(form_id)
    if form is None:
        raise HTTPException(status_code=404, detail="form not found")
    return form


@router.post("")
async def open_form(payload: dict) -> dict:
    try:
        user = User.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="email is required") from exc
    form = get_form_session_service().open(user)
    return {"form_id": form.form_id, "state": form.controller.state.value}


@router.get("/{form_id}")
async def get_form(form_id: str) -> dict:
    return _get_form(form_id).snapshot()


@router.post("/{form_id}/file")
async def select_file(form_id: str, file: UploadFile = File(...)) -> dict:
    """Feed the selected receipt to the form and wait for its upload."""
    form = _get_form(form_id)
    try:
        if not file.filename:
            raise HTTPException(status_code=400, detail="Uploaded file must have a filename")
        selected = SelectedFile(
            name=PureWindowsPath(file.filename).name,
            content_type=file.content_type,
            content=await file.read(),
        )
    finally:
        await file.close()

    file_input = FileInput.with_file(selected)
    task = form.controller.handle_change_file(file_input)
    if task is not None:
        await task

    data = form.snapshot()
    data["accepted"] = task is not None
    data["file_input"] = file_input.value
    return data


@router.post("/{form_id}/submit")
async def submit_form(form_id: str, payload: dict[str, Any]) -> dict:
    form = _get_form(form_id)
    values = {field_id: payload[field_id] for field_id in FIELD_IDS if field_id in payload}
    await form.controller.handle_submit(values)

    data = form.snapshot()
    if form.controller.state is FormState.DONE:
        get_form_session_service().close(form_id)
    return data


@router.delete("/{form_id}")
async def discard_form(form_id: str) -> dict:
    """Close a form the user abandoned; pending uploads are left to finish."""
    form = _get_form(form_id)
    get_form_session_service().close(form_id)
    return {"form_id": form_id, "state": form.controller.state.value, "closed": True}
