from dataclasses import asdict, dataclass, field
from typing import Any

from pf_checker.core.numbers import to_number

RATING_CHEAP = "cheap"
RATING_FAIR = "fair"
RATING_EXPENSIVE = "expensive"
RATING_UNRATED = "unrated"


@dataclass(frozen=True)
class ListingRecord:
    url: str = ""                       # share link or origin + details path
    property_type: str = ""
    price_value: float | None = None
    price_currency: str = ""            # "AED"
    price_period: str = ""              # "sell", "yearly", ...
    title: str = ""
    location_full_name: str = ""
    bedrooms: Any = ""                  # raw: 2, "2", "studio" or ""
    bathrooms: Any = ""
    size_value: float | None = None
    size_unit: str = ""                 # "sqft"
    listed_date: str = ""               # ISO 8601 string
    reference: str = ""
    listing_id: str = ""


# CSV column order
LISTING_CSV_HEADER = [
    "url",
    "property_type",
    "price_value",
    "price_currency",
    "price_period",
    "title",
    "location_full_name",
    "bedrooms",
    "bathrooms",
    "size_value",
    "size_unit",
    "listed_date",
    "reference",
    "listing_id",
]


@dataclass(frozen=True)
class TransactionRecord:
    price: float | None = None
    price_per_area: float | None = None
    transaction_date: str = ""
    bedrooms_raw: Any = None            # first present alias, un-coerced
    size_raw: Any = None
    property_type: str = ""
    raw: dict = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class FilterBounds:
    bed_min: float | None = None
    bed_max: float | None = None
    size_min: float | None = None
    size_max: float | None = None

    @staticmethod
    def _active(bound: Any) -> bool:
        # same coercion apply_bounds uses, so "2" is an active bound
        return to_number(bound) is not None

    @property
    def is_empty(self) -> bool:
        return not any(
            self._active(b)
            for b in (self.bed_min, self.bed_max, self.size_min, self.size_max)
        )


@dataclass(frozen=True)
class EvaluatedListing(ListingRecord):
    price_per_area: float | None = None
    rating: str = RATING_UNRATED
    diff_pct_median: float | None = None
    diff_pct_mean: float | None = None


@dataclass(frozen=True)
class TransactionSummary:
    count: int = 0
    median_price_per_area: float | None = None
    mean_price_per_area: float | None = None
    items: list[TransactionRecord] = field(default_factory=list)


@dataclass(frozen=True)
class AnalysisResult:
    transactions: TransactionSummary
    listings: list[EvaluatedListing]

    def to_dict(self) -> dict[str, Any]:
        tx = self.transactions
        return {
            "transactions": {
                "count": tx.count,
                "median_price_per_area": tx.median_price_per_area,
                "mean_price_per_area": tx.mean_price_per_area,
                "items": [
                    {k: v for k, v in asdict(t).items() if k != "raw"}
                    for t in tx.items
                ],
            },
            "listings": [asdict(li) for li in self.listings],
        }
