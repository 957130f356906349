from __future__ import annotations

import pytest

from conftest import listings_page, next_data_page, transactions_page
from pf_checker.core.extract import (TransactionShape, dig, extract_listings,
                                     extract_transactions, find_next_data)


def test_dig_returns_none_on_missing_levels() -> None:
    data = {"a": {"b": {"c": 1}}, "x": [1, 2]}
    assert dig(data, "a", "b", "c") == 1
    assert dig(data, "a", "missing", "c") is None
    assert dig(data, "x", "0") is None
    assert dig(None, "a") is None


def test_extract_listings_from_page() -> None:
    html = listings_page([{"property": {"title": "A"}}, {"property": {"title": "B"}}])
    listings = extract_listings(html)
    assert [it["property"]["title"] for it in listings] == ["A", "B"]


def test_match_is_non_greedy_and_whitespace_tolerant() -> None:
    html = (
        "\n\n   <div>\n"
        + next_data_page({"props": {"pageProps": {"searchResult": {"listings": [{"id": 1}]}}}})
        + '\n<script id="other" type="application/json">{"broken": </script>'
    )
    assert extract_listings(html) == [{"id": 1}]


@pytest.mark.parametrize(
    "html",
    [
        "",
        "<html><body>no payload here</body></html>",
        '<script id="__NEXT_DATA__" type="application/json">{not json</script>',
        next_data_page([1, 2, 3]),
        next_data_page({"props": {}}),
        next_data_page({"props": {"pageProps": {"searchResult": None}}}),
        next_data_page({"props": {"pageProps": {"searchResult": {"listings": "nope"}}}}),
    ],
)
def test_missing_or_malformed_payload_yields_empty(html: str) -> None:
    assert extract_listings(html) == []
    page = extract_transactions(html)
    assert page.items == []
    assert page.total_pages == 1
    assert extract_transactions(html, TransactionShape.NESTED).items == []


def test_find_next_data_rejects_non_object() -> None:
    assert find_next_data(next_data_page([1])) is None
    assert find_next_data(next_data_page({"a": 1})) == {"a": 1}


def test_extract_transactions_list_shape() -> None:
    page = extract_transactions(transactions_page([{"price": 1}, {"price": 2}], total_pages=3))
    assert [it["price"] for it in page.items] == [1, 2]
    assert page.total_pages == 3


def test_extract_transactions_total_defaults_to_one() -> None:
    html = next_data_page({"props": {"pageProps": {"list": {"transactionList": [{"price": 1}]}}}})
    assert extract_transactions(html).total_pages == 1
    html = next_data_page(
        {"props": {"pageProps": {"list": {"transactionList": [], "totalPageCount": "abc"}}}}
    )
    assert extract_transactions(html).total_pages == 1


def test_extract_transactions_nested_shape_is_separate() -> None:
    nested = next_data_page(
        {"props": {"pageProps": {"transactions": {"transactions_list": {
            "transactions": {"items": [{"price": 5}]}}}}}}
    )
    assert extract_transactions(nested, TransactionShape.NESTED).items == [{"price": 5}]
    # the list shape does not look at the nested path
    assert extract_transactions(nested, TransactionShape.LIST).items == []
    # and vice versa
    listed = transactions_page([{"price": 1}], total_pages=4)
    assert extract_transactions(listed, TransactionShape.NESTED).items == []
