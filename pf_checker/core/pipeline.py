"""Multi-page retrieval and assembly of the listing-vs-transactions analysis.

Pages are fetched strictly one after another; there is never more than one
request in flight against the site. Any fetch failure aborts the whole run.
"""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from typing import Any

from pf_checker.core.extract import (TransactionShape, extract_listings,
                                     extract_transactions)
from pf_checker.core.filters import (apply_bounds, listing_beds, listing_size,
                                     transaction_beds, transaction_size)
from pf_checker.core.normalize import normalize_listing, normalize_transaction
from pf_checker.core.pricing import (DEFAULT_THRESHOLD_PCT, evaluate_listing,
                                     summarize_transactions)
from pf_checker.models import (AnalysisResult, FilterBounds, ListingRecord,
                               TransactionRecord)
from pf_checker.suppliers.base import PageFetcher

logger = logging.getLogger(__name__)

PAGE_PARAM_RE = re.compile(r"page=\d+")


def build_page_url(base: str, page: int) -> str:
    if "page=" in base:
        return PAGE_PARAM_RE.sub(f"page={page}", base)
    sep = "&" if "?" in base else "?"
    return f"{base}{sep}page={page}"


class _Pacer:
    """Sleeps between consecutive page requests (rate hint, 0 disables)."""

    def __init__(self, delay_seconds: float):
        self._delay = delay_seconds
        self._first = True

    def wait(self) -> None:
        if not self._first and self._delay > 0:
            time.sleep(self._delay)
        self._first = False


def scrape_listings(fetcher: PageFetcher, url: str, pages: int,
                    delay_seconds: float = 0) -> list[ListingRecord]:
    pacer = _Pacer(delay_seconds)
    rows: list[ListingRecord] = []
    for page in range(1, pages + 1):
        pacer.wait()
        markup = fetcher.fetch(build_page_url(url, page))
        items = extract_listings(markup)
        logger.info("listings page %d: %d items", page, len(items))
        rows.extend(normalize_listing(it) for it in items)
    return rows


def fetch_transactions(
    fetcher: PageFetcher,
    url: str,
    pages: int | None = None,
    shape: TransactionShape = TransactionShape.LIST,
    delay_seconds: float = 0,
) -> list[TransactionRecord]:
    pacer = _Pacer(delay_seconds)

    # page 1 tells us how many pages exist
    pacer.wait()
    first = extract_transactions(fetcher.fetch(build_page_url(url, 1)), shape)
    raw_items = list(first.items)
    total = max(1, first.total_pages)
    limit = min(pages or total, total)
    logger.info("transactions page 1: %d items, %d pages reported, fetching %d",
                len(first.items), total, limit)

    for page in range(2, limit + 1):
        pacer.wait()
        res = extract_transactions(fetcher.fetch(build_page_url(url, page)), shape)
        logger.info("transactions page %d: %d items", page, len(res.items))
        raw_items.extend(res.items)

    return [normalize_transaction(it) for it in raw_items]


@dataclass
class PageSample:
    """First record of one page, for checking the site still has the expected payload."""
    count: int = 0
    keys: list[str] = field(default_factory=list)
    first: dict[str, Any] | None = None


def inspect_page(
    fetcher: PageFetcher,
    url: str,
    kind: str = "listings",
    shape: TransactionShape = TransactionShape.LIST,
) -> PageSample:
    markup = fetcher.fetch(url)
    if kind == "transactions":
        items = extract_transactions(markup, shape).items
        first = items[0] if items else None
    else:
        items = extract_listings(markup)
        # listing fields live one level down
        first = items[0].get("property") if items else None
        if not isinstance(first, dict):
            first = items[0] if items else None
    if first is None:
        logger.warning("%s page had no %s", url, kind)
        return PageSample()
    return PageSample(count=len(items), keys=sorted(first), first=first)


def _has_price(listing: ListingRecord) -> bool:
    # price-less entries are ads/placeholders, not listings
    return listing.price_value is not None and listing.price_value > 0


def run_analysis(
    fetcher: PageFetcher,
    listing_url: str,
    listing_pages: int,
    tx_url: str,
    tx_pages: int | None = None,
    threshold_pct: float = DEFAULT_THRESHOLD_PCT,
    bounds: FilterBounds | None = None,
    tx_shape: TransactionShape = TransactionShape.LIST,
    delay_seconds: float = 0,
) -> AnalysisResult:
    bounds = bounds or FilterBounds()

    listings = [
        li for li in scrape_listings(fetcher, listing_url, listing_pages, delay_seconds)
        if _has_price(li)
    ]
    listings = apply_bounds(listings, bounds, listing_beds, listing_size)

    transactions = fetch_transactions(fetcher, tx_url, tx_pages, tx_shape, delay_seconds)
    transactions = apply_bounds(transactions, bounds, transaction_beds, transaction_size)

    summary = summarize_transactions(transactions)
    evaluated = [
        evaluate_listing(li, summary.median_price_per_area,
                         summary.mean_price_per_area, threshold_pct)
        for li in listings
    ]
    logger.info("analysis done: %d transactions (median %s), %d listings",
                summary.count, summary.median_price_per_area, len(evaluated))
    return AnalysisResult(transactions=summary, listings=evaluated)
