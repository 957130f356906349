from __future__ import annotations

from typing import Any, Iterable

from pf_checker.core.extract import dig
from pf_checker.core.numbers import to_number
from pf_checker.core.pricing import price_per_area
from pf_checker.models import ListingRecord, TransactionRecord

SITE_ORIGIN = "https://www.propertyfinder.ae"

# Transaction payloads name the same field differently depending on the page;
# aliases are consulted in this order.
TX_BEDROOM_KEYS = ("bedrooms", "bedroom", "beds", "numberOfBedrooms", "bed")
TX_SIZE_KEYS = ("propertySize", "size", "area", "property_size", "size_value")
TX_PRICE_PER_AREA_KEY = "pricePerSqft"


def first_present(obj: dict, keys: Iterable[str]) -> Any:
    # first alias holding a non-null value; "" still counts as present
    for key in keys:
        if obj.get(key) is not None:
            return obj[key]
    return None


def _text(value: Any) -> str:
    if value is None or value == "":
        return ""
    return str(value)


def _section(obj: Any, key: str) -> dict:
    value = dig(obj, key)
    return value if isinstance(value, dict) else {}


def listing_url(prop: dict) -> str:
    share_url = prop.get("share_url")
    if share_url:
        return str(share_url)
    details_path = prop.get("details_path")
    if details_path:
        return f"{SITE_ORIGIN}{details_path}"
    return ""


def normalize_listing(raw: dict) -> ListingRecord:
    prop = _section(raw, "property")
    price = _section(prop, "price")
    size = _section(prop, "size")
    location = _section(prop, "location")

    return ListingRecord(
        url=listing_url(prop),
        property_type=_text(prop.get("property_type")),
        price_value=to_number(price.get("value")),
        price_currency=_text(price.get("currency")),
        price_period=_text(price.get("period")),
        title=_text(prop.get("title")),
        location_full_name=_text(location.get("full_name")),
        # the site reports zero bedrooms as "studio"; falsy values mean unknown
        bedrooms=prop.get("bedrooms") or "",
        bathrooms=prop.get("bathrooms") or "",
        size_value=to_number(size.get("value")),
        size_unit=_text(size.get("unit")),
        listed_date=_text(prop.get("listed_date")),
        reference=_text(prop.get("reference")),
        listing_id=_text(prop.get("listing_id")),
    )


def normalize_transaction(raw: dict) -> TransactionRecord:
    if not isinstance(raw, dict):
        raw = {}
    beds = first_present(raw, TX_BEDROOM_KEYS)
    size = first_present(raw, TX_SIZE_KEYS)
    price = to_number(raw.get("price"))

    return TransactionRecord(
        price=price,
        price_per_area=price_per_area(
            price, to_number(size), direct=raw.get(TX_PRICE_PER_AREA_KEY)
        ),
        transaction_date=_text(raw.get("transactionDate")),
        bedrooms_raw=beds,
        size_raw=size,
        property_type=_text(raw.get("propertyType")),
        raw=raw,
    )
