from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath, PureWindowsPath

from billed.domain import SelectedFile

ALLOWED_EXTENSIONS = frozenset({"png", "jpg", "jpeg"})
FILE_TYPE_ERROR = "Seuls les fichiers JPG, JPEG ou PNG sont autorisés."


@dataclass(slots=True, frozen=True)
class AcceptedFile:
    file: SelectedFile
    extension: str


@dataclass(slots=True, frozen=True)
class RejectedFile:
    file: SelectedFile
    message: str = FILE_TYPE_ERROR


def file_extension(filename: str) -> str:
    """Return the lower-cased extension of ``filename`` without the dot.

    Browsers may hand over a Windows-style path, so only the basename is
    considered.
    """

    basename = PureWindowsPath(PurePosixPath(filename).name).name
    suffix = PurePosixPath(basename).suffix
    return suffix.lower().lstrip(".")


def validate_attachment(file: SelectedFile) -> AcceptedFile | RejectedFile:
    """Gate a receipt attachment on its extension.

    The declared content type is not trusted; ``receipt.png`` sent as
    ``application/octet-stream`` is accepted and ``document.pdf`` sent as
    ``image/png`` is rejected.
    """

    extension = file_extension(file.name)
    if extension in ALLOWED_EXTENSIONS:
        return AcceptedFile(file=file, extension=extension)
    return RejectedFile(file=file)
