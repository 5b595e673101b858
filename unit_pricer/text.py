from __future__ import annotations

import html
import re


_PRICE_RE = re.compile(r"\$?(\d+\.\d{2})")
_UNIT_PRICE_RE = re.compile(r"\$?(\d+\.?\d*)\s*(?:/|per)\s*([\w\s]+)", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")


def parse_price(text: object) -> float | None:
    """Pull a dollar amount out of text like "$1,299.99" or "Now 3.47"."""
    if text is None or text == "":
        return None
    m = _PRICE_RE.search(str(text).replace(",", ""))
    if not m:
        return None
    return float(m.group(1))


def parse_unit_price(text: str | None) -> tuple[float | None, str | None]:
    """Parse a store's own unit price, e.g. "($0.39/ounce)" -> (0.39, "ounce")."""
    if not text:
        return None, None
    m = _UNIT_PRICE_RE.search(str(text))
    if not m:
        return None, None
    return float(m.group(1)), m.group(2).strip().lower()


def clean_html(text: str | None) -> str:
    if not text:
        return ""
    s = _TAG_RE.sub("", text)
    s = html.unescape(s).replace("\xa0", " ")
    return re.sub(r"\s+", " ", s).strip()


def generate_search_term(name: str) -> str:
    """Turn a catalog product name into a short store search query."""
    term = re.sub(r"Amazon Brand\s*-?\s*", "", name, flags=re.IGNORECASE)
    # Trailing pack info
    term = re.sub(r",\s*(Pack of \d+|Package May Vary).*$", "", term, flags=re.IGNORECASE)
    # Trailing count, e.g. " - 12 Rolls"
    term = re.sub(r"\s*-\s*\d+\s*(Count|Pack|Rolls?|Bags?|Cans?)\s*$", "", term, flags=re.IGNORECASE)
    term = re.sub(r"\([^)]*\)", " ", term)
    term = re.sub(r"\s+", " ", term).strip()
    # First 8 significant words; longer queries return garbage
    words = [w for w in term.split(" ") if len(w) > 1]
    return " ".join(words[:8])
