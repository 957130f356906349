from __future__ import annotations

from pf_checker.core.extract import TransactionShape
from pf_checker.core.params import (clamp_pages, clamp_threshold, parse_bound,
                                    parse_params, parse_tx_shape)
from pf_checker.models import FilterBounds

DEFAULT_LISTING = "https://www.propertyfinder.ae/en/search?l=10493"
DEFAULT_TX = "https://www.propertyfinder.ae/en/transactions/buy/dubai/x"


def test_listing_pages_clamped() -> None:
    assert clamp_pages(None, 10) == 1
    assert clamp_pages("", 10) == 1
    assert clamp_pages("0", 10) == 1
    assert clamp_pages("-4", 10) == 1
    assert clamp_pages("3", 10) == 3
    assert clamp_pages(99, 10) == 10


def test_tx_pages_default_to_unbounded() -> None:
    assert clamp_pages(None, 20, default=None) is None
    assert clamp_pages("abc", 20, default=None) is None
    assert clamp_pages("25", 20, default=None) == 20


def test_zero_pages_clamp_instead_of_falling_back() -> None:
    assert clamp_pages("0", 20, default=None) == 1
    assert clamp_pages(0, 20, default=None) == 1
    params = parse_params({"tx_pages": "0", "threshold": "0"}, DEFAULT_LISTING, DEFAULT_TX)
    assert params.tx_pages == 1
    assert params.threshold_pct == 1


def test_threshold_clamped() -> None:
    assert clamp_threshold(None) == 10
    assert clamp_threshold("abc") == 10
    assert clamp_threshold("0") == 1
    assert clamp_threshold(-5) == 1
    assert clamp_threshold("0.2") == 1
    assert clamp_threshold(75) == 50
    assert clamp_threshold("15") == 15


def test_bounds_are_optional_non_negative_numbers() -> None:
    assert parse_bound("") is None
    assert parse_bound("two") is None
    assert parse_bound("-1") is None
    assert parse_bound("0") == 0
    assert parse_bound("1,200") == 1200


def test_parse_params_defaults() -> None:
    params = parse_params({}, DEFAULT_LISTING, DEFAULT_TX)
    assert params.listing_url == DEFAULT_LISTING
    assert params.tx_url == DEFAULT_TX
    assert params.listing_pages == 1
    assert params.tx_pages is None
    assert params.threshold_pct == 10
    assert params.bounds == FilterBounds()
    assert params.bounds.is_empty


def test_parse_params_from_user_input() -> None:
    params = parse_params(
        {"listing_url": "  https://a/search  ", "listing_pages": "12", "tx_url": " ",
         "tx_pages": "3", "threshold": "5", "bed_min": "1", "size_max": "1500"},
        DEFAULT_LISTING,
        DEFAULT_TX,
    )
    assert params.listing_url == "https://a/search"
    assert params.tx_url == DEFAULT_TX
    assert params.listing_pages == 10
    assert params.tx_pages == 3
    assert params.threshold_pct == 5
    assert params.bounds == FilterBounds(bed_min=1, size_max=1500)


def test_tx_shape_defaults_to_list() -> None:
    assert parse_tx_shape(None) is TransactionShape.LIST
    assert parse_tx_shape("bogus") is TransactionShape.LIST
    assert parse_tx_shape(" Nested ") is TransactionShape.NESTED
    assert parse_tx_shape(TransactionShape.NESTED) is TransactionShape.NESTED
    assert parse_params({}, DEFAULT_LISTING, DEFAULT_TX).tx_shape is TransactionShape.LIST
    params = parse_params({"tx_shape": "nested"}, DEFAULT_LISTING, DEFAULT_TX)
    assert params.tx_shape is TransactionShape.NESTED
