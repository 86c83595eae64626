"""Unit tests for the import normalizer"""

import pytest
from datetime import date, datetime
from credit_desk.domain.importer import (
    COLUMN_ALIASES,
    derive_status,
    normalize_import_rows,
    parse_date,
    parse_number,
    resolve_field,
)
from credit_desk.domain.exceptions import ImportParseError


def test_normalize_template_row():
    """Row in the documented template layout maps field for field"""
    result = normalize_import_rows(
        [
            {
                "name": "Ahmed Ali",
                "phone": "01012345678",
                "creditScore": "720",
                "paymentCommitment": "85",
                "hagglingLevel": "4",
                "purchaseWillingness": "8",
                "lastPayment": "2024-01-15",
                "totalDebt": "5,000",
                "installmentAmount": "500",
                "status": "Good",
            }
        ]
    )

    assert result.errors == []
    record = result.records[0]
    assert record.name == "Ahmed Ali"
    assert record.phone == "01012345678"
    assert record.credit_score == 720
    assert record.payment_commitment == 85
    assert record.haggling_level == 4
    assert record.purchase_willingness == 8
    assert record.last_payment == "2024-01-15"
    assert record.total_debt == 5000
    assert record.installment_amount == 500
    assert record.status == "good"


def test_normalize_applies_defaults():
    result = normalize_import_rows([{"Name": "Mona", "Phone": "0100"}])
    record = result.records[0]

    assert record.credit_score == 650
    assert record.payment_commitment == 75
    assert record.haggling_level == 5
    assert record.purchase_willingness == 7
    assert record.total_debt == 0
    assert record.installment_amount == 0
    assert record.last_payment == ""
    assert record.status == "fair"  # derived from default 650


def test_normalize_arabic_headers():
    result = normalize_import_rows(
        [
            {
                "اسم العميل": "محمد",
                "رقم الهاتف": "٠١٠١٢٣٤٥٦٧٨",
                "الدرجة الائتمانية": "٧٨٠",
                "إجمالي الدين": "١٢٠٠",
                "الحالة": "ممتاز",
            }
        ]
    )

    record = result.records[0]
    assert record.name == "محمد"
    assert record.credit_score == 780
    assert record.total_debt == 1200
    assert record.status == "excellent"


def test_normalize_header_matching_ignores_case_and_separators():
    result = normalize_import_rows([{"NAME": "Omar", "phone number": "0111", "CREDIT_SCORE": 700, "total-debt": 10}])
    record = result.records[0]

    assert record.phone == "0111"
    assert record.credit_score == 700
    assert record.total_debt == 10


def test_missing_required_fields_reported_and_excluded():
    rows = [
        {"name": "Valid", "phone": "0100"},
        {"name": "", "phone": "0101"},
        {"name": "No Phone"},
        {"creditScore": 700},
        {"name": "Also Valid", "phone": "0102"},
    ]
    result = normalize_import_rows(rows)

    assert [r.name for r in result.records] == ["Valid", "Also Valid"]
    assert result.errors == [
        "Missing data at row 2: name",
        "Missing data at row 3: phone",
        "Missing data at row 4: name, phone",
    ]


@pytest.mark.parametrize(
    "column, value, field, expected",
    [
        ("creditScore", 950, "credit_score", 850),
        ("creditScore", 100, "credit_score", 300),
        ("paymentCommitment", 140, "payment_commitment", 100),
        ("paymentCommitment", -5, "payment_commitment", 0),
        ("hagglingLevel", 0, "haggling_level", 1),
        ("purchaseWillingness", 15, "purchase_willingness", 10),
        ("totalDebt", -300, "total_debt", 0),
        ("installmentAmount", -1, "installment_amount", 0),
    ],
)
def test_out_of_range_values_are_clamped(column, value, field, expected):
    result = normalize_import_rows([{"name": "X", "phone": "1", column: value}])

    assert result.errors == []
    assert getattr(result.records[0], field) == expected


def test_status_derived_when_missing_or_unknown():
    rows = [
        {"name": "A", "phone": "1", "creditScore": 760},
        {"name": "B", "phone": "2", "creditScore": 700},
        {"name": "C", "phone": "3", "creditScore": 699},
        {"name": "D", "phone": "4", "creditScore": 599, "status": "vip"},
    ]
    statuses = [r.status for r in normalize_import_rows(rows).records]
    assert statuses == ["excellent", "good", "fair", "poor"]


def test_supplied_status_wins_over_score():
    result = normalize_import_rows([{"name": "A", "phone": "1", "creditScore": 820, "status": "POOR"}])
    assert result.records[0].status == "poor"


def test_derive_status_thresholds():
    assert derive_status(750) == "excellent"
    assert derive_status(749) == "good"
    assert derive_status(700) == "good"
    assert derive_status(650) == "fair"
    assert derive_status(600) == "fair"
    assert derive_status(599) == "poor"


def test_normalize_is_idempotent():
    rows = [{"name": "A", "phone": "1", "lastPayment": "03/04/2024"}, {"phone": "2"}]
    assert normalize_import_rows(rows) == normalize_import_rows(rows)


def test_empty_batch_is_a_parse_failure():
    with pytest.raises(ImportParseError):
        normalize_import_rows([])


def test_non_mapping_row_is_a_parse_failure():
    with pytest.raises(ImportParseError):
        normalize_import_rows([{"name": "A", "phone": "1"}, ["not", "a", "row"]])


def test_max_rows_enforced():
    with pytest.raises(ImportParseError):
        normalize_import_rows([{"name": "A", "phone": "1"}] * 3, max_rows=2)


def test_resolve_field_takes_first_non_empty_alias():
    row = {"name": "  ", "Customer Name": "Layla", "full_name": "Ignored"}
    assert resolve_field(row, COLUMN_ALIASES["name"]) == "Layla"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("15/01/2024", "2024-01-15"),  # day-month-year
        ("03/04/2024", "2024-04-03"),  # ambiguous: day first
        ("12/25/2024", "2024-12-25"),  # month-day-year fallback
        ("2024-01-15", "2024-01-15"),
        ("2024/1/5", "2024-01-05"),
        ("January 5, 2024", "2024-01-05"),
        (datetime(2024, 2, 1, 9, 30), "2024-02-01"),
        (date(2024, 2, 1), "2024-02-01"),
        (45306, "2024-01-15"),  # Excel serial
        ("not a date", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_parse_date(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1,250.5", 1250.5),
        ("٣٥٠", 350),
        ("80%", 80),
        (12, 12),
        ("abc", 99),
        (None, 99),
        (True, 99),
        (float("nan"), 99),
    ],
)
def test_parse_number(value, expected):
    assert parse_number(value, default=99) == expected


def test_whole_float_phone_keeps_digits():
    """Spreadsheet readers hand back numeric phones as floats"""
    result = normalize_import_rows([{"name": "A", "phone": 1012345678.0}])
    assert result.records[0].phone == "1012345678"


def test_integer_fields_round_half_up():
    rows = [
        {"name": "A", "phone": "1", "creditScore": "748.5", "hagglingLevel": "2.5"},
        {"name": "B", "phone": "2", "creditScore": "749.5"},
    ]
    first, second = normalize_import_rows(rows).records

    assert first.credit_score == 749
    assert first.haggling_level == 3
    assert second.credit_score == 750
    assert second.status == "excellent"


def test_overlong_customer_code_is_dropped():
    """A code too long to store is discarded so one is generated on save"""
    rows = [
        {"name": "A", "phone": "1", "customerCode": "C" * 33},
        {"name": "B", "phone": "2", "customerCode": "C" * 32},
    ]
    first, second = normalize_import_rows(rows).records

    assert first.customer_code == ""
    assert second.customer_code == "C" * 32
