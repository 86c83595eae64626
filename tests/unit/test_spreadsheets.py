"""Unit tests for spreadsheet decoding, export and template"""

import io
import json
import pytest
from datetime import datetime
from openpyxl import Workbook
from credit_desk.domain.models import CustomerRecord
from credit_desk.domain.importer import normalize_import_rows
from credit_desk.domain.spreadsheets import (
    EXPORT_COLUMNS,
    TEMPLATE_COLUMNS,
    export_customers_csv,
    read_rows,
    template_csv,
)
from credit_desk.domain.exceptions import ImportParseError, UnsupportedFileError


def _xlsx_bytes(rows: list) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def test_read_csv_with_bom():
    content = "﻿name,phone,creditScore\nAhmed,0100,720\n".encode("utf-8")
    rows = read_rows("customers.CSV", content)

    assert rows == [{"name": "Ahmed", "phone": "0100", "creditScore": "720"}]


def test_read_xlsx_first_sheet():
    content = _xlsx_bytes(
        [
            ["name", "phone", "creditScore", "lastPayment"],
            ["Sara", "0111", 690, datetime(2024, 3, 1)],
            [None, None, None, None],
            ["Omar", "0122", 810, None],
        ]
    )
    rows = read_rows("book.xlsx", content)

    assert len(rows) == 2  # blank row skipped
    assert rows[0]["name"] == "Sara"
    assert rows[0]["creditScore"] == 690
    assert rows[0]["lastPayment"] == datetime(2024, 3, 1)

    records = normalize_import_rows(rows).records
    assert records[0].last_payment == "2024-03-01"
    assert records[1].status == "excellent"


def test_read_json_array():
    content = json.dumps([{"name": "Layla", "phone": "0133"}]).encode("utf-8")
    assert read_rows("data.json", content) == [{"name": "Layla", "phone": "0133"}]


def test_read_json_object_rejected():
    with pytest.raises(ImportParseError):
        read_rows("data.json", b'{"name": "Layla"}')


def test_unsupported_extension():
    with pytest.raises(UnsupportedFileError):
        read_rows("customers.pdf", b"%PDF-1.4")


def test_empty_file_rejected():
    with pytest.raises(ImportParseError):
        read_rows("customers.csv", b"")


def test_corrupt_workbook_rejected():
    with pytest.raises(ImportParseError):
        read_rows("book.xlsx", b"not a zip archive")


def test_template_header_and_example_row():
    lines = template_csv().strip().split("\n")

    assert lines[0] == ",".join(TEMPLATE_COLUMNS)
    assert len(lines) == 2

    # The example row itself imports cleanly
    result = normalize_import_rows(read_rows("template.csv", template_csv().encode("utf-8")))
    assert result.errors == []
    assert result.records[0].status == "good"


def test_export_then_import_round_trip(sample_records: list[CustomerRecord]):
    content = export_customers_csv(sample_records)

    assert content.split("\n")[0] == ",".join(EXPORT_COLUMNS)

    result = normalize_import_rows(read_rows("export.csv", content.encode("utf-8")))
    assert result.errors == []
    assert result.records == sample_records


def test_read_csv_rejects_non_utf8():
    """Windows-1256 exports must not be imported as mangled text"""
    content = "name,phone\nمحمد,0100\n".encode("cp1256")
    with pytest.raises(ImportParseError, match="UTF-8"):
        read_rows("customers.csv", content)
