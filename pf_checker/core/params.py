"""Clamp loose user input (bot arguments, CLI flags) into pipeline parameters."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from pf_checker.core.extract import TransactionShape
from pf_checker.core.numbers import to_number
from pf_checker.core.pricing import (DEFAULT_THRESHOLD_PCT, MAX_THRESHOLD_PCT,
                                     MIN_THRESHOLD_PCT)
from pf_checker.models import FilterBounds

MAX_LISTING_PAGES = 10
MAX_TX_PAGES = 20


@dataclass(frozen=True)
class AnalysisParams:
    listing_url: str
    tx_url: str
    listing_pages: int = 1
    tx_pages: int | None = None         # None: every page the source reports
    threshold_pct: float = DEFAULT_THRESHOLD_PCT
    bounds: FilterBounds = field(default_factory=FilterBounds)
    tx_shape: TransactionShape = TransactionShape.LIST


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_pages(value: Any, maximum: int, default: int | None = 1) -> int | None:
    num = to_number(value)
    if num is None:
        return default
    return int(clamp(num, 1, maximum))


def clamp_threshold(value: Any) -> float:
    num = to_number(value)
    if num is None:
        return DEFAULT_THRESHOLD_PCT
    return clamp(num, MIN_THRESHOLD_PCT, MAX_THRESHOLD_PCT)


def parse_tx_shape(value: Any) -> TransactionShape:
    if isinstance(value, TransactionShape):
        return value
    text = str(value or "").strip().lower()
    if text == TransactionShape.NESTED.value:
        return TransactionShape.NESTED
    return TransactionShape.LIST


def parse_bound(value: Any) -> float | None:
    num = to_number(value)
    if num is None or num < 0:
        return None
    return num


def parse_bounds(raw: Mapping[str, Any]) -> FilterBounds:
    return FilterBounds(
        bed_min=parse_bound(raw.get("bed_min")),
        bed_max=parse_bound(raw.get("bed_max")),
        size_min=parse_bound(raw.get("size_min")),
        size_max=parse_bound(raw.get("size_max")),
    )


def parse_params(raw: Mapping[str, Any], default_listing_url: str,
                 default_tx_url: str) -> AnalysisParams:
    listing_url = str(raw.get("listing_url") or "").strip() or default_listing_url
    tx_url = str(raw.get("tx_url") or "").strip() or default_tx_url
    return AnalysisParams(
        listing_url=listing_url,
        tx_url=tx_url,
        listing_pages=clamp_pages(raw.get("listing_pages"), MAX_LISTING_PAGES),
        tx_pages=clamp_pages(raw.get("tx_pages"), MAX_TX_PAGES, default=None),
        threshold_pct=clamp_threshold(raw.get("threshold")),
        bounds=parse_bounds(raw),
        tx_shape=parse_tx_shape(raw.get("tx_shape")),
    )
