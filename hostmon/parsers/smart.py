"""Parser for ``smartctl -a`` text reports.

Covers both the ATA attribute table::

    ID# ATTRIBUTE_NAME          FLAG     VALUE WORST THRESH TYPE      UPDATED  WHEN_FAILED RAW_VALUE
      9 Power_On_Hours          0x0032   097   097   000    Old_age   Always       -       12345
    194 Temperature_Celsius     0x0022   058   045   000    Old_age   Always       -       42 (Min/Max 18/55)

and the NVMe health log (``Temperature: 38 Celsius``, ``Power On Hours: 1,234``).
Field labels drift between smartctl versions, so every field carries several
candidate rules.
"""

from __future__ import annotations

import re

from hostmon.models.disk import DiskHealth, HealthStatus
from hostmon.parsers.rules import FieldRule, RuleSet, extract_fields, parse_int, parse_str

SMART_ENABLED_MARKERS = ("SMART support is: Enabled", "SMART/Health Information")
SMART_PASSED_MARKER = "PASSED"


def _raw_value(attribute: str) -> FieldRule:
    """RAW_VALUE column of an ATA attribute row."""
    return FieldRule.of(
        rf"^\s*\d+\s+{attribute}\s+0x[0-9a-fA-F]+\s+\d+\s+\d+\s+[\d-]+\s+\S+\s+\S+\s+\S+\s+(\d[\d,]*)"
    )


def _normalized_value(attribute: str) -> FieldRule:
    """VALUE column of an ATA attribute row."""
    return FieldRule.of(rf"^\s*\d+\s+{attribute}\s+0x[0-9a-fA-F]+\s+(\d+)")


def _last_number(attribute: str) -> FieldRule:
    """Loose fallback: last integer on the attribute's line."""
    return FieldRule.of(rf"{attribute}\b.*?(\d[\d,]*)\s*(?:\([^)]*\))?\s*$")


def _percent_used_to_life(raw: str) -> int:
    return max(0, min(100, 100 - parse_int(raw)))


SMART_RULES: RuleSet = {
    "temperature_c": [
        _raw_value("Temperature_Celsius"),
        _raw_value("Airflow_Temperature_Cel"),
        FieldRule.of(r"Temperature.*?(\d+)\s*Celsius", flags=re.IGNORECASE),
        FieldRule.of(r"Temperature:\s*(\d+)", flags=re.IGNORECASE),
        _last_number("Temperature_Celsius"),
    ],
    "power_on_hours": [
        _raw_value("Power_On_Hours"),
        FieldRule.of(r"Power On Hours:\s*([\d,]+)"),
        _last_number("Power_On_Hours"),
    ],
    "power_cycle_count": [
        _raw_value("Power_Cycle_Count"),
        FieldRule.of(r"Power Cycles:\s*([\d,]+)"),
        _last_number("Power_Cycle_Count"),
    ],
    "reallocated_sectors": [
        _raw_value("Reallocated_Sector_Ct"),
        _last_number("Reallocated_Sector_Ct"),
    ],
    "pending_sectors": [
        _raw_value("Current_Pending_Sector"),
        _last_number("Current_Pending_Sector"),
    ],
    "life_remaining_percent": [
        FieldRule.of(r"Percentage Used:\s*(\d+)\s*%", _percent_used_to_life),
        _normalized_value("Percent_Lifetime_Remain"),
        _normalized_value("SSD_Life_Left"),
    ],
    "wear_leveling": [
        _normalized_value("Wear_Leveling_Count"),
    ],
    "model": [
        FieldRule.of(r"Device Model:\s*(.+)", parse_str),
        FieldRule.of(r"Model Number:\s*(.+)", parse_str),
    ],
    "serial": [
        FieldRule.of(r"Serial Number:\s*(.+)", parse_str),
    ],
}


def parse_smart_report(text: str) -> DiskHealth:
    fields = extract_fields(text, SMART_RULES)
    available = any(marker in text for marker in SMART_ENABLED_MARKERS)
    # Only an explicit PASSED counts as good; anything else stays unknown.
    status = HealthStatus.GOOD if SMART_PASSED_MARKER in text else HealthStatus.UNKNOWN
    return DiskHealth(smart_available=available, health_status=status, **fields)
