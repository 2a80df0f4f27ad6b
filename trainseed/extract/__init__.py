from .dates import extract_main_date, normalize_date
from .names import extract_names_with_dates, extract_tz_number
from .records import assemble_records, build_row_records

__all__ = [
    "assemble_records",
    "build_row_records",
    "extract_main_date",
    "extract_names_with_dates",
    "extract_tz_number",
    "normalize_date",
]
