"""
Lenient count parsing.

Les formulaires envoient des nombres sous toutes les formes ("5", 5, "5 units",
"", null...). Politique explicite : on lit l'entier de tête comme parseInt,
et une valeur illisible ne fait jamais échouer la requête.

Une valeur hors de la plage d'une colonne INTEGER (|n| > 2**31 - 1) est
traitée comme illisible.
"""
from __future__ import annotations

import math
import re
from typing import Any

MAX_COUNT = 2**31 - 1

_LEADING_INT = re.compile(r"\s*([+-]?)(\d+)")


def _in_range(n: int) -> int | None:
    return n if -MAX_COUNT <= n <= MAX_COUNT else None


def parse_count_or_none(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _in_range(value)
    if isinstance(value, float):
        return _in_range(int(value)) if math.isfinite(value) else None
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        if not m:
            return None
        digits = m.group(2).lstrip("0") or "0"
        # int() refuse les très longues chaînes : on coupe avant
        if len(digits) > len(str(MAX_COUNT)):
            return None
        return _in_range(int(m.group(1) + digits))
    return None


def parse_count_or_zero(value: Any) -> int:
    """Unit count policy: unparsable, out of range or negative -> 0."""
    n = parse_count_or_none(value)
    if n is None or n < 0:
        return 0
    return n
