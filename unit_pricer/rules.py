from __future__ import annotations

import re
from typing import Callable

from .models import CategoryRule, Conversion, PackMultiplierRule


OZ_PER_LB = 16.0
OZ_PER_KG = 35.274


def _as_is(m: re.Match[str]) -> float:
    return float(m.group(1))


def _weight_to_oz(m: re.Match[str]) -> float:
    val = float(m.group(1))
    text = m.group(0).lower()
    if "lb" in text:
        return val * OZ_PER_LB
    if "kg" in text:
        return val * OZ_PER_KG
    return val


CONVERSIONS: dict[Conversion, Callable[[re.Match[str]], float]] = {
    Conversion.NONE: _as_is,
    Conversion.WEIGHT_TO_OZ: _weight_to_oz,
}


# Leading digit groups only start at the beginning of a number and are width-capped,
# so a long run of digits is scanned once.
_INT = r"(?<![\d.])(\d{1,6})"
_DEC = r"(?<![\d.])([\d.]{1,10})"

# (match pattern, unit, quantity pattern, conversion)
# Order is priority: specific patterns must stay above the generic ones they overlap.
# Toilet paper and paper towels are left out on purpose: roll sizes are not comparable.
_CATEGORY_TABLE: tuple[tuple[str, str, str, Conversion], ...] = (
    (r"cat food.*cans", "can", _INT + r"\s*cans?", Conversion.NONE),
    (r"cat food.*lb", "lb", _DEC + r"\s*lbs?", Conversion.NONE),
    (r"dog food.*lb", "lb", _DEC + r"\s*lbs?", Conversion.NONE),
    (r"cat litter", "lb", _INT + r"\s*lbs?", Conversion.NONE),
    (r"coffee", "oz", _DEC + r"\s*(?:lbs?|oz|kg)", Conversion.WEIGHT_TO_OZ),
    (r"almonds", "oz", _INT + r"\s*oz", Conversion.NONE),
    (r"seeds", "oz", _DEC + r"\s*(?:lbs?|oz)", Conversion.WEIGHT_TO_OZ),
    (r"batteries", "battery", _INT + r"\s*(?:pack|count|ct)", Conversion.NONE),
    (r"tablets", "tablet", _INT + r"\s*tablets?", Conversion.NONE),
    (r"softgels", "softgel", _INT + r"\s*softgels?", Conversion.NONE),
    (r"bars", "bar", _INT + r"\s*bars?", Conversion.NONE),
    (r"deodorant.*pack", "stick", _INT + r"[- ]?pack", Conversion.NONE),
    (r"dryer sheets", "sheet", _INT + r"\s*(?:ct|count|sheets?)", Conversion.NONE),
    (r"wipes", "wipe", _INT + r"\s*(?:wipes|ct|count)\b", Conversion.NONE),
    (r"wipes.*pack", "pack", _INT + r"[- ]?pack", Conversion.NONE),
    (r"toothpaste.*pack", "tube", _INT + r"[- ]?pack", Conversion.NONE),
    (r"floss.*pack", "pack", _INT + r"[- ]?pack", Conversion.NONE),
    (r"razor.*refills", "cartridge", _INT + r"\s*(?:count|ct|refills?)", Conversion.NONE),
    (r"contact solution", "oz", _DEC + r"\s*oz", Conversion.NONE),
    (r"soap.*refill", "refill", _INT + r"[- ]?pack", Conversion.NONE),
    (r"water filter", "filter", _INT + r"\s*(?:pack|filters?)", Conversion.NONE),
    (r"tape.*rolls", "roll", _INT + r"\s*rolls?", Conversion.NONE),
    (r"tahini", "pack", _INT + r"\s*pack", Conversion.NONE),
    (r"plastic wrap", "sq ft", _INT + r"\s*sq\s*ft", Conversion.NONE),
    (r"chocolate.*almonds", "oz", _INT + r"\s*oz", Conversion.NONE),
    (r"cleanser.*oz", "oz", _DEC + r"\s*oz", Conversion.NONE),
    (r"body scrub", "oz", _DEC + r"\s*oz", Conversion.NONE),
    (r"hand cream", "oz", _DEC + r"\s*oz", Conversion.NONE),
    (r"cologne|edt|perfume", "oz", _DEC + r"\s*oz", Conversion.NONE),
    (r"shower.*count", "tablet", _INT + r"\s*(?:count|ct)", Conversion.NONE),
    (r"soft.picks", "pick", _INT + r"\s*(?:ct|count)", Conversion.NONE),
    (r"melatonin", "tablet", _INT + r"\s*tablets?", Conversion.NONE),
)


def build_category_rules(
    table: tuple[tuple[str, str, str, Conversion], ...] = _CATEGORY_TABLE,
) -> tuple[CategoryRule, ...]:
    return tuple(
        CategoryRule(
            match_pattern=re.compile(match),
            unit=unit,
            quantity_pattern=re.compile(quantity, re.IGNORECASE),
            conversion=conversion,
        )
        for match, unit, quantity, conversion in table
    )


CATEGORY_RULES: tuple[CategoryRule, ...] = build_category_rules()


# Group 1 always captures the container count. Only 2..24 is ever accepted,
# so counts are capped at three digits.
PACK_RULES: tuple[PackMultiplierRule, ...] = (
    PackMultiplierRule(re.compile(r"pack\s*of\s*(\d{1,3})(?!\d)", re.IGNORECASE), "pack"),
    PackMultiplierRule(re.compile(r"(?<!\d)(\d{1,3})\s*-?\s*pack\b", re.IGNORECASE), "pack"),
    PackMultiplierRule(
        re.compile(r"(?<![\w.])(\d{1,3})\s*x\s*[\d.]{1,10}\s*(?:oz|lbs?|kg|g|ml|ct|count)\b", re.IGNORECASE),
        "pack",
    ),
    PackMultiplierRule(re.compile(r",\s*(\d{1,3})\s*(jars?)\s*$", re.IGNORECASE), "jar"),
    PackMultiplierRule(re.compile(r",\s*(\d{1,3})\s*(bags?)\s*$", re.IGNORECASE), "bag"),
    PackMultiplierRule(re.compile(r",\s*(\d{1,3})\s*(bottles?)\s*$", re.IGNORECASE), "bottle"),
    PackMultiplierRule(re.compile(r",\s*(\d{1,3})\s*(boxes?)\s*$", re.IGNORECASE), "box"),
    PackMultiplierRule(re.compile(r",\s*(\d{1,3})\s*(tubes?)\s*$", re.IGNORECASE), "tube"),
    PackMultiplierRule(re.compile(r",\s*(\d{1,3})\s*(cans?)\s*$", re.IGNORECASE), "can"),
    PackMultiplierRule(re.compile(r",\s*(\d{1,3})\s*(sticks?)\s*$", re.IGNORECASE), "stick"),
)

MIN_PACK = 2
MAX_PACK = 24
