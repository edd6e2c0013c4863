from __future__ import annotations

import logging

from hostmon.models.disk import DiskCapacity

logger = logging.getLogger(__name__)

KIB = 1024


def parse_df(text: str) -> DiskCapacity | None:
    """Parse ``df -k <mount>`` output: a header plus one data row.

    Columns are ``filesystem kb-total kb-used kb-available ...``. A device
    name too long for its column makes df wrap the row onto two lines; those
    are joined back together.
    """
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if len(lines) < 2:
        return None

    parts = " ".join(lines[1:]).split()
    if len(parts) < 4:
        return None

    try:
        total, used, free = (int(p) * KIB for p in parts[1:4])
    except ValueError:
        logger.debug("Unexpected df row: %r", lines[1:])
        return None
    return DiskCapacity(total=total, used=used, free=free)
