from __future__ import annotations

import json
from typing import Any

from pf_checker.errors import FetchError
from pf_checker.suppliers.base import PageFetcher


def next_data_page(payload: Any) -> str:
    return (
        "<html><head><title>x</title></head><body>\n"
        '<script id="__NEXT_DATA__" type="application/json">'
        f"{json.dumps(payload)}"
        "</script>\n<script>window.foo = 1</script></body></html>"
    )


def listings_page(listings: list[dict]) -> str:
    return next_data_page({"props": {"pageProps": {"searchResult": {"listings": listings}}}})


def nested_transactions_page(items: list[dict]) -> str:
    return next_data_page(
        {"props": {"pageProps": {"transactions": {"transactions_list": {"transactions": {"items": items}}}}}}
    )


def transactions_page(items: list[dict], total_pages: int = 1) -> str:
    return next_data_page(
        {"props": {"pageProps": {"list": {"transactionList": items, "totalPageCount": total_pages}}}}
    )


def raw_listing(price: Any = 1_200_000, size: Any = 1000, beds: Any = 2, **extra: Any) -> dict:
    prop = {
        "title": "Apartment in JLT",
        "property_type": "Apartment",
        "price": {"value": price, "currency": "AED", "period": "sell"},
        "size": {"value": size, "unit": "sqft"},
        "location": {"full_name": "Uptown Tower, JLT, Dubai"},
        "bedrooms": beds,
        "bathrooms": 2,
        "listed_date": "2025-01-02T10:00:00Z",
        "reference": "REF-1",
        "listing_id": "1001",
        "details_path": "/en/plp/buy/apartment-1001.html",
    }
    prop.update(extra)
    return {"property": prop}


class FakeFetcher(PageFetcher):
    """Serves canned markup per URL and records the request order."""

    def __init__(self, pages: dict[str, str], fail_on: set[str] | None = None):
        self.pages = pages
        self.fail_on = fail_on or set()
        self.requested: list[str] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    def fetch(self, url: str) -> str:
        self.requested.append(url)
        if url in self.fail_on:
            raise FetchError(url, "boom")
        return self.pages.get(url, "<html></html>")

    def close(self) -> None:
        self.closed = True
