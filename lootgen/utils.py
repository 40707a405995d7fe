from __future__ import annotations

import json
import math
from typing import Any


def is_finite_number(x: Any) -> bool:
    if isinstance(x, bool):
        return False
    if not isinstance(x, (int, float)):
        return False
    return math.isfinite(float(x))


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x


def norm_name(value: Any) -> str:
    """Configuration key as stored (None -> ""). Keys are exact and case-sensitive."""
    if value is None:
        return ""
    return str(value)


def json_dumps(obj: Any) -> str:
    """Stable JSON dump for payloads and logs."""
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"), sort_keys=True, default=str)
