from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class Conversion(str, Enum):
    """How a rule turns its quantity match into a number."""

    NONE = "none"
    WEIGHT_TO_OZ = "weight_to_oz"


@dataclass(frozen=True)
class CategoryRule:
    match_pattern: re.Pattern[str]
    unit: str
    quantity_pattern: re.Pattern[str]
    conversion: Conversion = Conversion.NONE

    @property
    def container_keywords(self) -> str:
        # Container words already counted by this rule (e.g. "cans" in "cat food.*cans").
        return f"{self.match_pattern.pattern} {self.unit}".lower()


@dataclass(frozen=True)
class PackMultiplierRule:
    pattern: re.Pattern[str]
    container: str


@dataclass(frozen=True)
class UnitPrice:
    unit_price: float
    unit: str

    # Effective quantity: extracted quantity times the pack multiplier.
    count: float

    formatted: str  # e.g. "$0.39/oz"

    def as_dict(self) -> dict[str, object]:
        return {
            "unitPrice": self.unit_price,
            "unit": self.unit,
            "count": self.count,
            "formatted": self.formatted,
        }


@dataclass(frozen=True)
class Candidate:
    """A single competitor listing returned by a store search."""

    title: str
    url: str
    price: float | None = None
    store_unit_price: float | None = None   # store's own unit price, e.g. 0.39
    store_unit: str | None = None           # e.g. "ounce"
    image_url: str | None = None


@dataclass(frozen=True)
class ChosenProduct:
    candidate: Candidate
    unit_price: UnitPrice | None


@dataclass(frozen=True)
class CatalogItem:
    """An item from the user's subscription catalog."""

    id: str
    name: str
    subscribe_price: float | None = None    # subscribe-and-save price
    one_time_price: float | None = None

    @property
    def price(self) -> float | None:
        return self.subscribe_price or self.one_time_price or None


@dataclass(frozen=True)
class Deal:
    item_id: str
    item_name: str
    store: str
    competitor_price: float
    competitor_url: str
    competitor_unit_price: str   # formatted, e.g. "$0.39/oz"; "" when unknown
    catalog_price: float
    savings: float
    savings_pct: int
