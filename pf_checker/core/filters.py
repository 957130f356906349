from __future__ import annotations

from typing import Any, Callable, Sequence, TypeVar

from pf_checker.core.numbers import normalize_beds, to_number
from pf_checker.models import FilterBounds

T = TypeVar("T")


def _within(value: float | None, low: float | None, high: float | None) -> bool:
    # an unparseable value fails any active bound on its dimension
    if low is not None and (value is None or value < low):
        return False
    if high is not None and (value is None or value > high):
        return False
    return True


def apply_bounds(
    records: Sequence[T],
    bounds: FilterBounds,
    get_beds: Callable[[T], Any],
    get_size: Callable[[T], Any],
) -> Sequence[T]:
    """Keep records whose beds/size fall inside every active (inclusive) bound.

    With no active bound the input sequence itself is returned.
    """
    if bounds.is_empty:
        return records

    bed_min, bed_max, size_min, size_max = (
        to_number(b) for b in (bounds.bed_min, bounds.bed_max, bounds.size_min, bounds.size_max)
    )
    check_beds = bed_min is not None or bed_max is not None
    check_size = size_min is not None or size_max is not None

    out: list[T] = []
    for record in records:
        if check_beds and not _within(normalize_beds(get_beds(record)), bed_min, bed_max):
            continue
        if check_size and not _within(to_number(get_size(record)), size_min, size_max):
            continue
        out.append(record)
    return out


def listing_beds(listing) -> Any:
    return listing.bedrooms


def listing_size(listing) -> Any:
    return listing.size_value


def transaction_beds(tx) -> Any:
    return tx.bedrooms_raw


def transaction_size(tx) -> Any:
    return tx.size_raw
