from __future__ import annotations

import csv
import io
from typing import Any, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from pf_checker.core.params import AnalysisParams
from pf_checker.models import LISTING_CSV_HEADER, AnalysisResult, ListingRecord

TX_SHEET_HEADER = ["Price", "Price/Area", "Date", "Beds", "Size", "Type"]
TX_SHEET_WIDTHS = [14, 12, 12, 6, 10, 16]

LISTING_SHEET_HEADER = [
    "Title", "Price", "Currency", "Price/Area", "Median-diff%", "Avg-diff%",
    "Beds", "Baths", "Size", "Unit", "Rating", "URL",
]
LISTING_SHEET_WIDTHS = [40, 14, 6, 12, 12, 12, 6, 6, 10, 6, 8, 60]


def _cell(value: Any) -> Any:
    # 1200000.0 -> 1200000 so the CSV reads like the site
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, (str, int, float)):
        return str(value)
    return value


def _round(value: float | None, digits: int) -> Any:
    return "" if value is None else round(value, digits)


def listings_to_csv(listings: Sequence[ListingRecord]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(LISTING_CSV_HEADER)
    for li in listings:
        writer.writerow([_cell(getattr(li, name)) for name in LISTING_CSV_HEADER])
    return buf.getvalue().rstrip("\n")


def _set_widths(ws, widths: Sequence[int]) -> None:
    for idx, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def _or_none(value: Any) -> Any:
    return "(none)" if value is None else _cell(value)


def build_workbook(result: AnalysisResult, params: AnalysisParams) -> bytes:
    wb = Workbook()
    bounds = params.bounds
    tx = result.transactions

    ws = wb.active
    ws.title = "Parameters"
    for row in [
        ["Parameter", "Value"],
        ["Listing search URL", params.listing_url],
        ["Listing pages", params.listing_pages],
        ["Transactions URL", params.tx_url],
        ["Transaction pages", params.tx_pages or "all"],
        ["Threshold (%)", _cell(params.threshold_pct)],
        ["Beds min", _or_none(bounds.bed_min)],
        ["Beds max", _or_none(bounds.bed_max)],
        ["Size min", _or_none(bounds.size_min)],
        ["Size max", _or_none(bounds.size_max)],
        [],
        ["Summary", ""],
        ["Transactions", tx.count],
        ["Price/Area median", _round(tx.median_price_per_area, 2)],
        ["Price/Area mean", _round(tx.mean_price_per_area, 2)],
        ["Listings", len(result.listings)],
    ]:
        ws.append(row)
    ws["A1"].font = Font(bold=True)
    ws["A12"].font = Font(bold=True)
    _set_widths(ws, [22, 80])

    ws = wb.create_sheet("Transactions")
    ws.append(TX_SHEET_HEADER)
    for t in tx.items:
        ws.append([
            _cell(t.price),
            _round(t.price_per_area, 2),
            t.transaction_date,
            _cell(t.bedrooms_raw),
            _cell(t.size_raw),
            t.property_type,
        ])
    _set_widths(ws, TX_SHEET_WIDTHS)

    ws = wb.create_sheet("Listings")
    ws.append(LISTING_SHEET_HEADER)
    for li in result.listings:
        ws.append([
            li.title,
            _cell(li.price_value),
            li.price_currency,
            _round(li.price_per_area, 2),
            _round(li.diff_pct_median, 1),
            _round(li.diff_pct_mean, 1),
            _cell(li.bedrooms),
            _cell(li.bathrooms),
            _cell(li.size_value),
            li.size_unit,
            li.rating,
            li.url,
        ])
    _set_widths(ws, LISTING_SHEET_WIDTHS)

    for name in ("Transactions", "Listings"):
        for c in wb[name][1]:
            c.font = Font(bold=True)

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()
