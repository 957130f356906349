"""Locate and unpack the ``__NEXT_DATA__`` payload embedded in Property Finder pages.

Every function here degrades to an empty result instead of raising: a page
without the payload (or with an unexpected shape) is a valid, empty page.
"""
from __future__ import annotations

import enum
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

NEXT_DATA_RE = re.compile(
    r'<script id="__NEXT_DATA__" type="application/json">(.*?)</script>',
    re.DOTALL,
)

LISTINGS_PATH = ("props", "pageProps", "searchResult", "listings")
TX_LIST_PATH = ("props", "pageProps", "list")
TX_NESTED_PATH = (
    "props", "pageProps", "transactions", "transactions_list", "transactions", "items",
)


class TransactionShape(enum.Enum):
    LIST = "list"        # pageProps.list.transactionList + totalPageCount
    NESTED = "nested"    # pageProps.transactions.transactions_list.transactions.items


@dataclass
class TransactionPage:
    items: list[dict] = field(default_factory=list)
    total_pages: int = 1


def dig(obj: Any, *keys: str) -> Any | None:
    """Walk nested dicts; ``None`` as soon as a level is missing or not a dict."""
    cur = obj
    for key in keys:
        if not isinstance(cur, dict) or key not in cur:
            return None
        cur = cur[key]
    return cur


def find_next_data(markup: str) -> dict | None:
    match = NEXT_DATA_RE.search(markup or "")
    if not match:
        logger.debug("no __NEXT_DATA__ block found")
        return None
    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.debug("malformed __NEXT_DATA__ payload: %s", e)
        return None
    return payload if isinstance(payload, dict) else None


def _as_list(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [it for it in value if isinstance(it, dict)]


def _page_count(value: Any) -> int:
    try:
        count = int(float(str(value).replace(",", "").strip()))
    except (TypeError, ValueError, OverflowError):
        return 1
    return max(1, count)


def extract_listings(markup: str) -> list[dict]:
    data = find_next_data(markup)
    listings = _as_list(dig(data, *LISTINGS_PATH))
    if not listings:
        logger.debug("no listings in page payload")
    return listings


def extract_transactions(
    markup: str, shape: TransactionShape = TransactionShape.LIST
) -> TransactionPage:
    data = find_next_data(markup)
    if shape is TransactionShape.NESTED:
        # this shape carries no page count
        return TransactionPage(items=_as_list(dig(data, *TX_NESTED_PATH)))

    block = dig(data, *TX_LIST_PATH)
    items = _as_list(dig(block, "transactionList"))
    if not items:
        logger.debug("no transactions in page payload")
    total = dig(block, "totalPageCount")
    return TransactionPage(items=items, total_pages=_page_count(total) if total else 1)
