from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from hostmon.errors import ParseMismatch

logger = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\d+")
# 1,234  1.234  1 234  1'234
_GROUPED_DIGITS = re.compile(r"(?<=\d)[,.' ](?=\d{3}\b)")


def parse_int(raw: str) -> int:
    """Parse the leading integer of ``raw``, ignoring thousands separators.

    ``"1,234"`` -> 1234, ``"12345h+03m+10s"`` -> 12345.
    Raises :class:`~hostmon.errors.ParseMismatch` when no digits are present.
    """
    cleaned = _GROUPED_DIGITS.sub("", raw.strip())
    match = _LEADING_DIGITS.match(cleaned)
    if not match:
        raise ParseMismatch(f"no integer in {raw!r}")
    return int(match.group())


def parse_str(raw: str) -> str:
    return raw.strip()


@dataclass(frozen=True)
class FieldRule:
    """One candidate pattern for a field.

    The first capture group is trimmed and passed through ``convert``.
    """

    pattern: re.Pattern[str]
    convert: Callable[[str], Any] = parse_int

    @classmethod
    def of(cls, regex: str, convert: Callable[[str], Any] = parse_int, flags: int = 0) -> FieldRule:
        return cls(re.compile(regex, flags | re.MULTILINE), convert)


RuleSet = Mapping[str, Sequence[FieldRule]]


def extract_fields(text: str, rules: RuleSet) -> dict[str, Any]:
    """Extract every field in ``rules`` from ``text`` independently.

    Rules for a field are tried in order and the first one that matches with
    a non-empty capture and converts cleanly wins. Fields with no winning rule
    are left out of the result.
    """
    found: dict[str, Any] = {}
    for field_name, candidates in rules.items():
        for rule in candidates:
            match = rule.pattern.search(text)
            if not match:
                continue
            captured = (match.group(1) or "").strip()
            if not captured:
                continue
            try:
                found[field_name] = rule.convert(captured)
            except (ValueError, TypeError):
                logger.debug("Field %s: cannot convert %r", field_name, captured)
                continue
            break
    return found
