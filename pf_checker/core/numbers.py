import math
from typing import Any


def to_number(value: Any) -> float | None:
    """'1,250 ' -> 1250.0; blanks, text, NaN and inf -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        cleaned = str(value).replace(",", "").strip()
        if not cleaned:
            return None
        try:
            num = float(cleaned)
        except ValueError:
            return None
    return num if math.isfinite(num) else None


def normalize_beds(value: Any) -> float | None:
    if isinstance(value, str) and value.strip().lower() == "studio":
        return 0.0
    return to_number(value)
