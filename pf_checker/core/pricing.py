"""Price-per-area benchmark and relative rating of listings."""
from __future__ import annotations

import math
from dataclasses import fields
from typing import Any, Iterable, Sequence

from pf_checker.core.numbers import to_number
from pf_checker.models import (RATING_CHEAP, RATING_EXPENSIVE, RATING_FAIR,
                               RATING_UNRATED, EvaluatedListing, ListingRecord,
                               TransactionRecord, TransactionSummary)

DEFAULT_THRESHOLD_PCT = 10
MIN_THRESHOLD_PCT = 1
MAX_THRESHOLD_PCT = 50


def price_per_area(price: Any, size: Any, direct: Any = None) -> float | None:
    """Direct value when strictly positive, else price / size, else None."""
    direct_value = to_number(direct)
    if direct_value is not None and direct_value > 0:
        return direct_value
    price_value = to_number(price)
    size_value = to_number(size)
    if price_value is None or size_value is None or size_value <= 0:
        return None
    return price_value / size_value


def listing_price_per_area(listing: ListingRecord) -> float | None:
    return price_per_area(listing.price_value, listing.size_value)


def _finite(values: Iterable[Any]) -> list[float]:
    return [
        float(v) for v in values
        if isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
    ]


def median(values: Iterable[Any]) -> float | None:
    arr = sorted(_finite(values))
    if not arr:
        return None
    mid = len(arr) // 2
    if len(arr) % 2:
        return arr[mid]
    return (arr[mid - 1] + arr[mid]) / 2


def mean(values: Iterable[Any]) -> float | None:
    arr = [v for v in _finite(values) if v > 0]
    if not arr:
        return None
    return sum(arr) / len(arr)


def deviation_pct(value: float | None, benchmark: float | None) -> float | None:
    if not value or not benchmark:
        return None
    return (value - benchmark) / benchmark * 100


def rate(value: float | None, benchmark: float | None,
         threshold_pct: float = DEFAULT_THRESHOLD_PCT) -> str:
    if not value or not benchmark:
        return RATING_UNRATED
    diff = (value - benchmark) / benchmark
    if diff <= -threshold_pct / 100:
        return RATING_CHEAP
    if diff >= threshold_pct / 100:
        return RATING_EXPENSIVE
    return RATING_FAIR


def evaluate_listing(
    listing: ListingRecord,
    benchmark_median: float | None,
    benchmark_mean: float | None,
    threshold_pct: float = DEFAULT_THRESHOLD_PCT,
) -> EvaluatedListing:
    ppa = listing_price_per_area(listing)
    # the rating follows the median only; the mean deviation is informational
    return EvaluatedListing(
        **{f.name: getattr(listing, f.name) for f in fields(ListingRecord)},
        price_per_area=ppa,
        rating=rate(ppa, benchmark_median, threshold_pct),
        diff_pct_median=deviation_pct(ppa, benchmark_median),
        diff_pct_mean=deviation_pct(ppa, benchmark_mean),
    )


def summarize_transactions(transactions: Sequence[TransactionRecord]) -> TransactionSummary:
    values = [
        t.price_per_area for t in transactions
        if t.price_per_area is not None and t.price_per_area > 0
    ]
    return TransactionSummary(
        count=len(transactions),
        median_price_per_area=median(values),
        mean_price_per_area=mean(values),
        items=list(transactions),
    )
