"""Domain layer definitions."""

from .bills import DraftBill, FileInput, FormState, MultipartPayload, SelectedFile

__all__ = [
    "DraftBill",
    "FileInput",
    "FormState",
    "MultipartPayload",
    "SelectedFile",
]
