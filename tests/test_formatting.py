from __future__ import annotations

from pf_checker.bot.telegram_bot import parse_args
from pf_checker.core.params import AnalysisParams
from pf_checker.models import AnalysisResult, EvaluatedListing, TransactionSummary
from pf_checker.utils.formatting import (build_keyboard, cheapest,
                                         format_listing_line, format_money,
                                         format_pct, format_summary,
                                         rating_counts)


def _listing(diff, rating, url="https://x/1", title="A <b> & co") -> EvaluatedListing:
    return EvaluatedListing(
        url=url, title=title, price_value=1_000_000.0, price_currency="AED",
        bedrooms=2, size_value=1000.0, size_unit="sqft", price_per_area=1000.0,
        rating=rating, diff_pct_median=diff, diff_pct_mean=diff,
    )


def test_number_formatting() -> None:
    assert format_money(None) == "n/a"
    assert format_money(1234567.8, "AED") == "1,234,568 AED"
    assert format_pct(14.2857) == "+14.3%"
    assert format_pct(-3) == "-3.0%"
    assert format_pct(None) == "n/a"


def test_cheapest_orders_by_median_deviation() -> None:
    listings = [_listing(5, "fair"), _listing(-20, "cheap"), _listing(None, "unrated"),
                _listing(30, "expensive")]
    assert [li.diff_pct_median for li in cheapest(listings, top=2)] == [-20, 5]
    assert rating_counts(listings) == {"cheap": 1, "fair": 1, "expensive": 1, "unrated": 1}


def test_format_summary_escapes_titles() -> None:
    result = AnalysisResult(
        transactions=TransactionSummary(count=3, median_price_per_area=1050.0,
                                        mean_price_per_area=1100.0),
        listings=[_listing(-20, "cheap")],
    )
    params = AnalysisParams(listing_url="https://l", tx_url="https://t")
    text = format_summary(result, params)
    assert "<b>Transactions:</b> 3" in text
    assert "Median price/area: 1,050" in text
    assert "threshold ±10%" in text
    assert "A &lt;b&gt; &amp; co" in text
    assert "(-20.0%)" in text


def test_listing_line_escapes_currency() -> None:
    li = EvaluatedListing(title="x", price_value=900_000.0, price_currency="<AED>",
                          price_per_area=900.0, diff_pct_median=-10.0)
    line = format_listing_line(li)
    assert "<b>900,000 &lt;AED&gt;</b>" in line
    assert "<AED>" not in line


def test_keyboard_skips_listings_without_url() -> None:
    assert build_keyboard([_listing(1, "fair", url="")]) is None
    markup = build_keyboard([_listing(1, "fair"), _listing(2, "fair", url="")])
    assert len(markup.inline_keyboard) == 1
    assert markup.inline_keyboard[0][0].url == "https://x/1"


def test_parse_bot_args() -> None:
    args = ["https://www.propertyfinder.ae/en/search?l=1", "listing-pages=2", "Bed_Min=1",
            "garbage", "threshold=15"]
    assert parse_args(args) == {
        "url": "https://www.propertyfinder.ae/en/search?l=1",
        "listing_pages": "2",
        "bed_min": "1",
        "threshold": "15",
    }
