from .df import parse_df
from .rules import FieldRule, extract_fields, parse_int
from .smart import parse_smart_report
from .wmic import parse_wmic_drive, parse_wmic_list, parse_wmic_volume

__all__ = [
    "FieldRule",
    "extract_fields",
    "parse_df",
    "parse_int",
    "parse_smart_report",
    "parse_wmic_drive",
    "parse_wmic_list",
    "parse_wmic_volume",
]
