from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from billed.core.form_fields import bare_identifier, build_bill, parse_amount, parse_pct
from billed.core.validation import FILE_TYPE_ERROR, AcceptedFile, RejectedFile, file_extension, validate_attachment
from billed.domain import DraftBill, SelectedFile


@pytest.mark.parametrize("name", ["a.png", "b.jpg", "c.jpeg", "D.PNG", "e.JpEg", "scan.2024.jpg"])
def test_guard_accepts_image_extensions(name):
    result = validate_attachment(SelectedFile(name=name, content_type="application/octet-stream"))
    assert isinstance(result, AcceptedFile)
    assert result.extension == name.rsplit(".", 1)[1].lower()


@pytest.mark.parametrize("name", ["document.pdf", "photo.gif", "archive.png.zip", "noextension", "png", ".jpg.txt"])
def test_guard_rejects_other_files(name):
    result = validate_attachment(SelectedFile(name=name, content_type="image/png"))
    assert isinstance(result, RejectedFile)
    assert result.message == FILE_TYPE_ERROR


def test_extension_ignores_client_side_directories():
    assert file_extension("C:\\fakepath\\receipt.JPG") == "jpg"
    assert file_extension("/home/me/receipts.d/receipt") == ""


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("20", 20), ("", 20), (None, 20), ("abc", 20), ("20.5", 20), ("10%", 10), (" 5", 5), ("0", 0), ("9" * 5000, 20), ("1234567890", 20), ("123456789", 123456789)],
)
def test_parse_pct(raw, expected):
    assert parse_pct(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("348", 348), ("12.50", 12.5), ("12,5", 12.5), ("", None), ("abc", None), ("nan", None), (100, 100), ("1e2000000", None), ("9" * 5000, None), ("1e14", 10**14), ("1e15", None)],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize(
    ("key", "expected"),
    [("1234", "1234"), ("47qAXb6fIm2zOKkLzMro?token=abc", "47qAXb6fIm2zOKkLzMro"), ("abc#frag", "abc")],
)
def test_bare_identifier(key, expected):
    assert bare_identifier(key) == expected


def test_build_bill_uses_draft_attachment():
    draft = DraftBill(file_name="test.png", file_url="https://test.com/test.png", bill_id="1234")
    form = {
        "expense-type": "Restaurants et bars",
        "expense-name": "Déjeuner client",
        "datepicker": "2024-05-02",
        "amount": "42",
        "vat": "",
        "pct": "",
        "commentary": "",
    }

    bill = build_bill(form, email="employee@test.com", draft=draft)

    assert bill.model_dump(by_alias=True) == {
        "email": "employee@test.com",
        "type": "Restaurants et bars",
        "name": "Déjeuner client",
        "date": "2024-05-02",
        "amount": 42,
        "vat": "",
        "pct": 20,
        "commentary": "",
        "fileUrl": "https://test.com/test.png",
        "fileName": "test.png",
        "status": "pending",
    }


def test_build_bill_with_missing_fields():
    bill = build_bill({}, email="employee@test.com", draft=DraftBill())

    assert bill.type == ""
    assert bill.amount is None
    assert bill.pct == 20
    assert bill.file_url is None
    assert bill.file_name is None


def test_build_bill_with_oversized_numbers_falls_back():
    form = {"pct": "9" * 5000, "amount": "1e2000000"}

    bill = build_bill(form, email="employee@test.com", draft=DraftBill())

    assert bill.pct == 20
    assert bill.amount is None
