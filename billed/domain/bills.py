"""Domain entities for the new-bill form session."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class FormState(str, Enum):
    """Lifecycle of a single new-bill form session."""

    EMPTY = "empty"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    SUBMITTING = "submitting"
    DONE = "done"


@dataclass(slots=True, frozen=True)
class SelectedFile:
    """A file picked by the user, as delivered by the file input."""

    name: str
    content_type: str | None = None
    content: bytes = b""


@dataclass(slots=True)
class FileInput:
    """The file input element: the selected files and its displayed value."""

    files: list[SelectedFile] = field(default_factory=list)
    value: str = ""

    @classmethod
    def with_file(cls, file: SelectedFile) -> "FileInput":
        return cls(files=[file], value=file.name)

    def clear(self) -> None:
        self.files = []
        self.value = ""


@dataclass(slots=True, frozen=True)
class DraftBill:
    """Identifiers produced by the create-phase upload.

    The three fields only ever change together, and only on a successful
    upload, so the draft is replaced rather than mutated.
    """

    file_name: str | None = None
    file_url: str | None = None
    bill_id: str | None = None

    @property
    def is_uploaded(self) -> bool:
        return self.bill_id is not None


@dataclass(slots=True)
class MultipartPayload:
    """Multipart body for the create-phase call."""

    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, SelectedFile] = field(default_factory=dict)
