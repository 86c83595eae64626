"""Import normalizer - heterogeneous spreadsheet rows to canonical customer records"""

import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from dateutil import parser as date_parser
from credit_desk.domain.models import CustomerRecord, ImportResult, CUSTOMER_STATUSES, MAX_CUSTOMER_CODE_LENGTH
from credit_desk.domain.exceptions import ImportParseError
from credit_desk.utils.date_utils import excel_serial_to_date

# Ordered candidate column names per logical field; first non-empty match wins.
# Matching ignores case, spaces, underscores and hyphens.
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "customer_code": ("customerCode", "customer_code", "Customer Code", "code", "كود العميل", "رقم العميل"),
    "name": ("name", "Name", "customer_name", "Customer Name", "full_name", "الاسم", "اسم العميل"),
    "phone": ("phone", "Phone", "phone_number", "Phone Number", "mobile", "الهاتف", "رقم الهاتف", "الجوال"),
    "credit_score": ("creditScore", "credit_score", "Credit Score", "score", "الدرجة الائتمانية"),
    "payment_commitment": (
        "paymentCommitment",
        "payment_commitment",
        "Payment Commitment",
        "الالتزام بالدفع",
        "نسبة الالتزام",
    ),
    "haggling_level": (
        "hagglingLevel",
        "haggling_level",
        "Haggling Level",
        "negotiation_level",
        "مستوى المساومة",
        "مستوى التفاوض",
    ),
    "purchase_willingness": (
        "purchaseWillingness",
        "purchase_willingness",
        "Purchase Willingness",
        "willingness_to_buy",
        "الرغبة في الشراء",
    ),
    "last_payment": (
        "lastPayment",
        "last_payment",
        "Last Payment",
        "last_payment_date",
        "Last Payment Date",
        "آخر دفعة",
        "تاريخ آخر دفعة",
    ),
    "total_debt": ("totalDebt", "total_debt", "Total Debt", "debt", "إجمالي الدين", "الدين"),
    "installment_amount": (
        "installmentAmount",
        "installment_amount",
        "Installment Amount",
        "installment",
        "قيمة القسط",
        "مبلغ القسط",
    ),
    "status": ("status", "Status", "الحالة"),
}

REQUIRED_FIELDS = ("name", "phone")

# field -> (default, lower bound, upper bound)
NUMERIC_RULES: Dict[str, Tuple[float, float, Optional[float]]] = {
    "credit_score": (650, 300, 850),
    "payment_commitment": (75, 0, 100),
    "haggling_level": (5, 1, 10),
    "purchase_willingness": (7, 1, 10),
    "total_debt": (0, 0, None),
    "installment_amount": (0, 0, None),
}
INTEGER_FIELDS = ("credit_score", "haggling_level", "purchase_willingness")

# Day-month-year first, then month-day-year, then year-month-day
DATE_PATTERNS = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y.%m.%d",
)
_FREE_FORM_DEFAULT = datetime(2000, 1, 1)

STATUS_ALIASES = {
    "excellent": "excellent",
    "good": "good",
    "fair": "fair",
    "poor": "poor",
    "ممتاز": "excellent",
    "جيد": "good",
    "مقبول": "fair",
    "ضعيف": "poor",
}

# Arabic-Indic and Eastern Arabic-Indic digits, Arabic decimal/thousands separators
_DIGIT_TRANSLATION = str.maketrans(
    "٠١٢٣٤٥٦٧٨٩۰۱۲۳۴۵۶۷۸۹٫٬",
    "0123456789" "0123456789" ".,",
)


def derive_status(credit_score: float) -> str:
    """Status band from credit score: 750 excellent, 700 good, 600 fair, else poor"""
    if credit_score >= 750:
        return "excellent"
    elif credit_score >= 700:
        return "good"
    elif credit_score >= 600:
        return "fair"
    return "poor"


def _normalize_key(key: Any) -> str:
    return "".join(ch for ch in str(key).strip().lower() if ch not in " _-")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def resolve_field(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """Return the value of the first alias present in row with a non-empty value"""
    return _first_match(_index_row(row), aliases)


def _index_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    # Keys differing only by case or separators keep their first non-blank value
    indexed: Dict[str, Any] = {}
    for key, value in row.items():
        if not _is_blank(value):
            indexed.setdefault(_normalize_key(key), value)
    return indexed


def _first_match(indexed: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    for alias in aliases:
        value = indexed.get(_normalize_key(alias))
        if value is not None:
            return value
    return None


def parse_text(value: Any) -> str:
    """Cell value as trimmed text; whole floats lose their trailing .0"""
    if _is_blank(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_number(value: Any, default: float) -> float:
    """Parse a loosely typed numeric cell, falling back to default"""
    if _is_blank(value) or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().translate(_DIGIT_TRANSLATION)
        text = text.replace(",", "").replace("%", "").strip()
        try:
            number = float(text)
        except ValueError:
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_date(value: Any) -> str:
    """Parse a date cell into ISO YYYY-MM-DD, or "" when unparseable"""
    if _is_blank(value) or isinstance(value, bool):
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        parsed = excel_serial_to_date(value)
        return parsed.isoformat() if parsed else ""

    text = str(value).strip().translate(_DIGIT_TRANSLATION)
    for pattern in DATE_PATTERNS:
        try:
            return datetime.strptime(text, pattern).date().isoformat()
        except ValueError:
            continue

    try:
        return date_parser.parse(text, default=_FREE_FORM_DEFAULT).date().isoformat()
    except (ValueError, OverflowError):
        return ""


def clamp(value: float, lower: float, upper: Optional[float]) -> float:
    value = max(lower, value)
    if upper is not None:
        value = min(upper, value)
    return value


def resolve_status(value: Any, credit_score: float) -> str:
    """Keep a recognised supplied status, otherwise derive it from credit score"""
    supplied = STATUS_ALIASES.get(parse_text(value).lower())
    if supplied in CUSTOMER_STATUSES:
        return supplied
    return derive_status(credit_score)


def normalize_row(row: Mapping[str, Any], column_aliases: Mapping[str, Sequence[str]]) -> Tuple[Optional[CustomerRecord], List[str]]:
    """
    Normalize a single raw row.

    Returns (record, missing_fields); record is None when a required field is missing.
    """
    indexed = _index_row(row)
    raw = {field: _first_match(indexed, column_aliases.get(field, ())) for field in COLUMN_ALIASES}

    texts = {field: parse_text(raw[field]) for field in REQUIRED_FIELDS}
    missing = [field for field in REQUIRED_FIELDS if not texts[field]]
    if missing:
        return None, missing

    numbers: Dict[str, float] = {}
    for field, (default, lower, upper) in NUMERIC_RULES.items():
        number = clamp(parse_number(raw[field], default), lower, upper)
        numbers[field] = math.floor(number + 0.5) if field in INTEGER_FIELDS else number

    # Codes that do not fit the column are dropped; storage generates a fresh one
    customer_code = parse_text(raw["customer_code"])
    if len(customer_code) > MAX_CUSTOMER_CODE_LENGTH:
        customer_code = ""

    record = CustomerRecord(
        name=texts["name"],
        phone=texts["phone"],
        credit_score=numbers["credit_score"],
        payment_commitment=numbers["payment_commitment"],
        haggling_level=numbers["haggling_level"],
        purchase_willingness=numbers["purchase_willingness"],
        last_payment=parse_date(raw["last_payment"]),
        total_debt=numbers["total_debt"],
        installment_amount=numbers["installment_amount"],
        status=resolve_status(raw["status"], numbers["credit_score"]),
        customer_code=customer_code,
    )
    return record, []


def normalize_import_rows(
    rows: Iterable[Mapping[str, Any]],
    column_aliases: Mapping[str, Sequence[str]] = COLUMN_ALIASES,
    max_rows: Optional[int] = None,
) -> ImportResult:
    """
    Main entry point: normalize a fully loaded batch of raw import rows.

    Every row is evaluated independently. Rows missing name or phone are
    excluded and reported as "Missing data at row N: field" (N is 1-based);
    out-of-range numbers are clamped, never rejected.

    Raises:
        ImportParseError: batch is empty, too large, or contains a non-mapping row
    """
    rows = list(rows)
    if not rows:
        raise ImportParseError("No rows found to import")
    if max_rows is not None and len(rows) > max_rows:
        raise ImportParseError(f"Import has {len(rows)} rows; the maximum is {max_rows}")

    result = ImportResult()
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, Mapping):
            raise ImportParseError(f"Row {index} is not a column-to-value mapping")

        record, missing = normalize_row(row, column_aliases)
        if record is None:
            result.errors.append(f"Missing data at row {index}: {', '.join(missing)}")
            continue
        result.records.append(record)

    return result
