from __future__ import annotations

import logging
import math
import re
from decimal import Decimal, ROUND_HALF_UP

from .models import CategoryRule, UnitPrice
from .rules import CATEGORY_RULES, CONVERSIONS, MAX_PACK, MIN_PACK, PACK_RULES

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def round2(value: float) -> float:
    """Round to cents, halves away from zero (0.125 -> 0.13)."""
    return float(Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _positive_price(total_price: object) -> float | None:
    if total_price is None or isinstance(total_price, bool):
        return None
    try:
        price = float(total_price)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def _extract_quantity(rule: CategoryRule, name: str) -> tuple[float, re.Match[str]] | None:
    m = rule.quantity_pattern.search(name)
    if not m:
        return None
    try:
        qty = CONVERSIONS[rule.conversion](m)
    except ValueError:
        # e.g. "[\d.]+" captured a lone "."
        return None
    if not math.isfinite(qty) or qty <= 0:
        return None
    return qty, m


def classify(name: str) -> tuple[CategoryRule, float, re.Match[str]] | None:
    """Find the first category rule that matches *name* and yields a quantity.

    Returns ``(rule, quantity, match)`` or None. A rule whose keyword matches
    but whose quantity cannot be extracted is skipped, and the next rule in
    priority order is tried.
    """
    if not isinstance(name, str) or not name.strip():
        return None

    name_lower = name.lower()
    for rule in CATEGORY_RULES:
        if not rule.match_pattern.search(name_lower):
            continue
        extracted = _extract_quantity(rule, name)
        if extracted is None:
            logger.debug("rule %r matched %r but no quantity", rule.match_pattern.pattern, name)
            continue
        qty, m = extracted
        return rule, qty, m
    return None


def extract_pack_multiplier(
    name: str,
    unit_keyword: str = "",
    *,
    quantity_span: tuple[int, int] | None = None,
) -> int:
    """Detect "Pack of 2", "3-Pack", "2x 7oz", ", 2 Jars" and similar.

    A container word already present in *unit_keyword* is not counted again,
    nor is a count that sits at *quantity_span* (the number the category rule
    already used as its quantity). Counts outside [2, 24] are ignored.
    """
    uk_lower = (unit_keyword or "").lower()
    for rule in PACK_RULES:
        m = rule.pattern.search(name)
        if not m:
            continue
        if rule.container != "pack" and rule.container in uk_lower:
            continue
        if quantity_span is not None and _overlaps(m.span(1), quantity_span):
            continue
        n = int(m.group(1))
        if MIN_PACK <= n <= MAX_PACK:
            return n
    return 1


def _overlaps(a: tuple[int, int], b: tuple[int, int]) -> bool:
    return a[0] < b[1] and b[0] < a[1]


def compute_unit_price(name: str, total_price: float) -> UnitPrice | None:
    price = _positive_price(total_price)
    if price is None:
        return None

    found = classify(name)
    if found is None:
        return None
    rule, qty, m = found

    pack = extract_pack_multiplier(name, rule.container_keywords, quantity_span=m.span(1))
    count = qty * pack
    if not math.isfinite(count) or count <= 0:
        return None

    unit_price = round2(price / count)
    logger.debug(
        "%r -> %s %s (rule %r, pack x%d)", name, count, rule.unit, rule.match_pattern.pattern, pack
    )
    return UnitPrice(
        unit_price=unit_price,
        unit=rule.unit,
        count=count,
        formatted=f"${unit_price:.2f}/{rule.unit}",
    )


def normalize(product_name: str, total_price: float) -> UnitPrice | None:
    """Public entry point: normalized per-unit price for a listing, or None."""
    return compute_unit_price(product_name, total_price)
