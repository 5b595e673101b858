from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from .models import Candidate, CatalogItem, ChosenProduct, Deal, UnitPrice
from .normalize import normalize, round2


def choose_best(candidates: list[Candidate]) -> ChosenProduct | None:
    """Prefer the first listing whose name yields a unit price.

    Falls back to the first listing that has a price at all, with no unit price.
    """
    priced = [c for c in candidates if c.price is not None and c.price > 0]
    if not priced:
        return None

    for c in priced:
        up = normalize(c.title, c.price)
        if up is not None:
            return ChosenProduct(candidate=c, unit_price=up)

    return ChosenProduct(candidate=priced[0], unit_price=None)


def cheapest_alternative(
    current: UnitPrice | None,
    alternatives: list[Candidate],
) -> tuple[Candidate, UnitPrice] | None:
    """Return the alternative with the lowest unit price below *current*.

    Only alternatives expressed in the same unit are comparable.
    """
    if current is None or not alternatives:
        return None

    cheaper: list[tuple[Candidate, UnitPrice]] = []
    for alt in alternatives:
        up = normalize(alt.title, alt.price)
        if up is None or up.unit != current.unit:
            continue
        if up.unit_price < current.unit_price:
            cheaper.append((alt, up))

    if not cheaper:
        return None
    cheaper.sort(key=lambda x: x[1].unit_price)
    return cheaper[0]


def _percent(value: float) -> int:
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def find_better_deals(
    catalog: list[CatalogItem],
    offers: dict[str, dict[str, Candidate]],
    *,
    store: str | None = None,
) -> list[Deal]:
    """Competitor offers that beat the catalog price, biggest savings first.

    *offers* maps catalog item id -> store name -> the listing found there.
    Items without a catalog price and offers without a price or URL are skipped.
    """
    by_id = {item.id: item for item in catalog}

    deals: list[Deal] = []
    for item_id, stores in offers.items():
        item = by_id.get(item_id)
        if item is None:
            continue
        catalog_price = item.price
        if not catalog_price or catalog_price <= 0:
            continue

        for store_name, c in stores.items():
            if store and store_name.lower() != store.lower():
                continue
            if not c.price or c.price <= 0 or not c.url:
                continue
            if c.price >= catalog_price:
                continue

            up = normalize(c.title, c.price)
            deals.append(
                Deal(
                    item_id=item.id,
                    item_name=item.name,
                    store=store_name.lower(),
                    competitor_price=c.price,
                    competitor_url=c.url,
                    competitor_unit_price=up.formatted if up else "",
                    catalog_price=catalog_price,
                    savings=round2(catalog_price - c.price),
                    savings_pct=_percent((1 - c.price / catalog_price) * 100),
                )
            )

    deals.sort(key=lambda d: -d.savings)
    return deals
