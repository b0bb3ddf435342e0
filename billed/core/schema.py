from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class User(BaseModel):
    """Identity persisted in the session under the ``user`` key."""

    type: str = "Employee"
    email: str


class CreatedBill(BaseModel):
    """Body returned by the create-phase call on the bills resource."""

    model_config = ConfigDict(populate_by_name=True)

    file_url: str = Field(alias="fileUrl", min_length=1)
    key: str = Field(min_length=1)

    @field_validator("key", mode="before")
    @classmethod
    def _stringify_key(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class BillRecord(BaseModel):
    """Expense report handed to the update-phase call."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    type: str
    name: str
    date: str
    amount: int | float | None = None
    vat: str = ""
    pct: int = 20
    commentary: str = ""
    file_url: str | None = Field(default=None, alias="fileUrl")
    file_name: str | None = Field(default=None, alias="fileName")
    status: Literal["pending", "accepted", "refused"] = "pending"
