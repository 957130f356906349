from html import escape
from typing import Sequence

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from pf_checker.core.params import AnalysisParams
from pf_checker.models import (RATING_CHEAP, RATING_EXPENSIVE, RATING_FAIR,
                               RATING_UNRATED, AnalysisResult, EvaluatedListing)

RATING_LABELS = {
    RATING_CHEAP: "🟢 cheap",
    RATING_FAIR: "🟡 fair",
    RATING_EXPENSIVE: "🔴 expensive",
    RATING_UNRATED: "⚪ unrated",
}


def format_money(value: float | None, currency: str = "") -> str:
    if value is None:
        return "n/a"
    text = f"{value:,.0f}"
    return f"{text} {currency}".strip()


def format_pct(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:+.1f}%"


def rating_counts(listings: Sequence[EvaluatedListing]) -> dict[str, int]:
    counts = {rating: 0 for rating in RATING_LABELS}
    for li in listings:
        counts[li.rating] = counts.get(li.rating, 0) + 1
    return counts


def cheapest(listings: Sequence[EvaluatedListing], top: int = 5) -> list[EvaluatedListing]:
    rated = [li for li in listings if li.diff_pct_median is not None]
    return sorted(rated, key=lambda li: li.diff_pct_median)[:top]


def format_listing_line(li: EvaluatedListing) -> str:
    # "<b>1,200,000 AED</b> 2 bd · 1,000 sqft · 1,200/sqft (+14.3%)"
    unit = li.size_unit or "area"
    parts = [f"<b>{escape(format_money(li.price_value, li.price_currency))}</b>"]
    if li.bedrooms != "":
        parts.append(f"{escape(str(li.bedrooms))} bd")
    if li.size_value is not None:
        parts.append(f"{li.size_value:,.0f} {escape(unit)}")
    parts.append(f"{format_money(li.price_per_area)}/{escape(unit)} "
                 f"({format_pct(li.diff_pct_median)})")
    return " · ".join(parts) + f"\n{escape(li.title)}"


def format_summary(result: AnalysisResult, params: AnalysisParams, top: int = 5) -> str:
    tx = result.transactions
    counts = rating_counts(result.listings)
    lines = [
        f"<b>Transactions:</b> {tx.count}",
        f"Median price/area: {format_money(tx.median_price_per_area)}",
        f"Mean price/area: {format_money(tx.mean_price_per_area)}",
        "",
        f"<b>Listings:</b> {len(result.listings)} (threshold ±{params.threshold_pct:g}%)",
        " · ".join(f"{RATING_LABELS[r]} {n}" for r, n in counts.items() if r in RATING_LABELS),
    ]
    best = cheapest(result.listings, top)
    if best:
        lines += ["", f"<b>Top {len(best)} vs median:</b>"]
        lines += [format_listing_line(li) for li in best]
    return "\n".join(lines)


def build_keyboard(listings: Sequence[EvaluatedListing]) -> InlineKeyboardMarkup | None:
    # one button per row, only listings with a resolvable link
    rows = [
        [InlineKeyboardButton(f"🏢 {format_money(li.price_value, li.price_currency)}", url=li.url)]
        for li in listings if li.url
    ]
    return InlineKeyboardMarkup(rows) if rows else None
