"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import Optional

EXCEL_EPOCH = date(1899, 12, 30)
MAX_EXCEL_SERIAL = 2_958_465  # 9999-12-31


def excel_serial_to_date(serial: float) -> Optional[date]:
    """Convert an Excel serial day number to a date (None if out of range)"""
    if serial < 1 or serial > MAX_EXCEL_SERIAL:
        return None
    return EXCEL_EPOCH + timedelta(days=int(serial))


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)"""
    return (end - start).days
