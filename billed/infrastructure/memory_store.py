"""In-process store used when no remote API is configured, and in tests."""
from __future__ import annotations

import uuid
from pathlib import PurePosixPath
from typing import Any

from billed.domain import MultipartPayload

from .store import StoreError


class InMemoryResource:
    """Records of one resource, keyed by the identifier handed out on create."""

    def __init__(self, name: str, *, images_url: str) -> None:
        self.name = name
        self._images_url = images_url.rstrip("/")
        self.records: dict[str, dict[str, Any]] = {}

    async def create(self, payload: MultipartPayload) -> dict[str, Any]:
        key = uuid.uuid4().hex
        record: dict[str, Any] = dict(payload.fields)
        attachment = payload.files.get("file")
        file_url: str | None = None
        if attachment is not None:
            suffix = PurePosixPath(attachment.name).suffix.lower()
            file_url = f"{self._images_url}/{key}{suffix}"
            record["fileName"] = attachment.name
            record["fileUrl"] = file_url
        self.records[key] = record
        return {"fileUrl": file_url, "key": key}

    async def update(self, data: dict[str, Any], *, selector: str | None = None) -> dict[str, Any]:
        if not selector or selector not in self.records:
            raise StoreError(f"{self.name}/{selector} not found", status_code=404)
        record = self.records[selector]
        record.update(data)
        return {"id": selector, **record}


class InMemoryStore:
    """Simple in-memory store for local runs and tests."""

    def __init__(self, *, images_url: str = "https://localhost:3456/images") -> None:
        self._images_url = images_url
        self._resources: dict[str, InMemoryResource] = {}

    def resource(self, name: str) -> InMemoryResource:
        if name not in self._resources:
            self._resources[name] = InMemoryResource(name, images_url=self._images_url)
        return self._resources[name]
