"""Spreadsheet decoding for imports, plus the CSV export and template layout"""

import csv
import io
import json
import zipfile
from typing import Any, Dict, Iterable, List
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from credit_desk.domain.models import CustomerRecord
from credit_desk.domain.exceptions import ImportParseError, UnsupportedFileError

TEMPLATE_COLUMNS = (
    "name",
    "phone",
    "creditScore",
    "paymentCommitment",
    "hagglingLevel",
    "purchaseWillingness",
    "lastPayment",
    "totalDebt",
    "installmentAmount",
    "status",
)
EXPORT_COLUMNS = ("customerCode",) + TEMPLATE_COLUMNS

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".json")

TEMPLATE_EXAMPLE_ROW = ("Ahmed Ali", "01012345678", 720, 85, 5, 7, "2024-01-15", 5000, 500, "good")


def read_csv_rows(content: bytes) -> List[Dict[str, Any]]:
    """Decode CSV bytes (UTF-8, BOM tolerated) into header-keyed rows"""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportParseError("CSV must be UTF-8; re-save the sheet as 'CSV UTF-8'") from e

    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise ImportParseError("CSV has no header row")
    return [dict(row) for row in reader]


def read_xlsx_rows(content: bytes) -> List[Dict[str, Any]]:
    """Decode the first worksheet of an .xlsx workbook; first row is the header"""
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
        raise ImportParseError(f"Could not read workbook: {e}") from e

    try:
        sheet = workbook.worksheets[0]
        values = sheet.iter_rows(values_only=True)
        header = next(values, None)
        if not header or all(cell is None for cell in header):
            raise ImportParseError("Worksheet has no header row")

        columns = [str(cell).strip() if cell is not None else "" for cell in header]
        rows = []
        for cells in values:
            # Trailing formatting often leaves fully empty rows behind
            if cells is None or all(cell is None for cell in cells):
                continue
            rows.append({col: cell for col, cell in zip(columns, cells) if col})
        return rows
    finally:
        workbook.close()


def read_json_rows(content: bytes) -> List[Dict[str, Any]]:
    """Decode a JSON array of objects"""
    try:
        data = json.loads(content.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ImportParseError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ImportParseError("JSON import must be an array of objects")
    return data


def read_rows(filename: str, content: bytes) -> List[Dict[str, Any]]:
    """
    Decode an uploaded file into raw rows, dispatching on extension.

    Raises:
        UnsupportedFileError: extension is not .csv, .xlsx or .json
        ImportParseError: file is empty or structurally unusable
    """
    extension = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError(f"Unsupported file type; expected one of {', '.join(SUPPORTED_EXTENSIONS)}")
    if not content:
        raise ImportParseError("Uploaded file is empty")

    if extension == ".csv":
        return read_csv_rows(content)
    elif extension == ".xlsx":
        return read_xlsx_rows(content)
    return read_json_rows(content)


def _write_csv(header: Iterable[str], rows: Iterable[Iterable[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def template_csv() -> str:
    """Import template: the documented header row and one example customer"""
    return _write_csv(TEMPLATE_COLUMNS, [TEMPLATE_EXAMPLE_ROW])


def export_customers_csv(records: Iterable[CustomerRecord]) -> str:
    """Export customers in the import layout so the file can be re-imported"""
    return _write_csv(
        EXPORT_COLUMNS,
        (
            (
                r.customer_code,
                r.name,
                r.phone,
                r.credit_score,
                r.payment_commitment,
                r.haggling_level,
                r.purchase_willingness,
                r.last_payment,
                r.total_debt,
                r.installment_amount,
                r.status,
            )
            for r in records
        ),
    )
