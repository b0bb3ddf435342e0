"""Helpers turning the raw new-bill form values into a :class:`BillRecord`."""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Mapping

from billed.core.schema import BillRecord
from billed.domain import DraftBill

EXPENSE_TYPE = "expense-type"
EXPENSE_NAME = "expense-name"
DATEPICKER = "datepicker"
AMOUNT = "amount"
VAT = "vat"
PCT = "pct"
COMMENTARY = "commentary"
FILE = "file"
FORM = "form-new-bill"

FIELD_IDS = (EXPENSE_TYPE, EXPENSE_NAME, DATEPICKER, AMOUNT, VAT, PCT, COMMENTARY)

DEFAULT_PCT = 20

_LEADING_INT = re.compile(r"^\s*([+-]?\d{1,9})(?!\d)")

MAX_AMOUNT_DIGITS = 15


def _text(form: Mapping[str, object], field_id: str) -> str:
    value = form.get(field_id)
    if value is None:
        return ""
    return str(value)


def parse_amount(raw: object) -> int | float | None:
    """Parse the amount field.

    Blank, unparseable or out-of-range input (15 integer digits or more)
    yields ``None``.
    """

    text = str(raw if raw is not None else "").strip()
    if not text:
        return None
    try:
        value = Decimal(text.replace(",", "."))
    except InvalidOperation:
        return None
    if not value.is_finite() or value.adjusted() >= MAX_AMOUNT_DIGITS:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def parse_pct(raw: object) -> int:
    """Parse the leading integer of the percentage field, defaulting to 20.

    Runs of more than nine digits are treated as unparseable.
    """

    match = _LEADING_INT.match(str(raw if raw is not None else ""))
    if not match:
        return DEFAULT_PCT
    return int(match.group(1))


def bare_identifier(key: str) -> str:
    """Strip a query string or fragment the store may append to a key."""

    return re.split(r"[?#]", str(key), maxsplit=1)[0]


def build_bill(form: Mapping[str, object], *, email: str, draft: DraftBill) -> BillRecord:
    """Assemble the record submitted for ``form``.

    The attachment fields come from ``draft`` as they are, including ``None``
    when the upload has not completed.
    """

    return BillRecord(
        email=email,
        type=_text(form, EXPENSE_TYPE),
        name=_text(form, EXPENSE_NAME),
        date=_text(form, DATEPICKER),
        amount=parse_amount(form.get(AMOUNT)),
        vat=_text(form, VAT),
        pct=parse_pct(form.get(PCT)),
        commentary=_text(form, COMMENTARY),
        file_url=draft.file_url,
        file_name=draft.file_name,
        status="pending",
    )
