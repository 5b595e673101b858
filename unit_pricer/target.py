from __future__ import annotations

import logging
import time
from typing import Any

from .http import HttpClient
from .models import Candidate
from .text import clean_html, parse_price, parse_unit_price

logger = logging.getLogger(__name__)

TARGET_API_BASE = "https://redsky.target.com/redsky_aggregations/v1/web"
DEFAULT_STORE_ID = "3991"


class TargetClient:
    """Search Target's RedSky product API and return priced listings."""

    def __init__(self, *, api_key: str, store_id: str = DEFAULT_STORE_ID, base_url: str = TARGET_API_BASE):
        self.api_key = api_key
        self.store_id = store_id
        self.http = HttpClient(
            base_url=base_url,
            headers={
                "Origin": "https://www.target.com",
                "Referer": "https://www.target.com/",
            },
        )

    def search(self, term: str, *, count: int = 10) -> list[Candidate]:
        params = {
            "key": self.api_key,
            "keyword": term,
            "channel": "WEB",
            "count": str(count),
            "default_purchasability_filter": "true",
            "page": "/s/" + term,
            "pricing_store_id": self.store_id,
            "visitor_id": f"visitor_{int(time.time() * 1000)}",
        }
        logger.info("target search: %s", term)
        data = self._get_json("plp_search_v2", params=params)

        products = ((data.get("data") or {}).get("search") or {}).get("products") or []
        out: list[Candidate] = []
        for row in products:
            c = _parse_product(row, term)
            if c is not None:
                out.append(c)
        logger.debug("target returned %d products, %d usable", len(products), len(out))
        return out

    def _get_json(self, path: str, *, params: dict[str, Any] | None = None) -> dict[str, Any]:
        resp = self.http.get(path, params=params)
        if resp.status_code >= 400:
            raise RuntimeError(f"Target API error {resp.status_code} for {path}: {resp.text[:500]}")
        try:
            data = resp.json()
        except ValueError as e:
            raise RuntimeError(f"Failed to decode JSON from Target for {path}: {e}")
        if not isinstance(data, dict):
            raise RuntimeError(f"Unexpected JSON from Target for {path}: {type(data).__name__}")
        return data


def _row_price(price_data: dict[str, Any]) -> float | None:
    raw = price_data.get("current_retail")
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw) if raw > 0 else None
    return parse_price(raw if raw is not None else price_data.get("formatted_current_price"))


def _parse_product(row: dict[str, Any], term: str) -> Candidate | None:
    item = row.get("item") or {}
    price_data = row.get("price") or {}
    if not item or not price_data:
        return None

    title = clean_html((item.get("product_description") or {}).get("title"))[:200]
    if not title:
        return None

    tcin = row.get("tcin") or ""
    url = f"https://www.target.com/p/-/A-{tcin}" if tcin else f"https://www.target.com/s?searchTerm={term}"

    images = (item.get("enrichment") or {}).get("images") or {}
    image_url = images.get("primary_image_url")
    if not image_url:
        labels = images.get("content_labels") or []
        image_url = labels[0].get("image_url") if labels else None

    store_unit_price, store_unit = parse_unit_price(price_data.get("formatted_unit_price"))

    return Candidate(
        title=title,
        url=url,
        price=_row_price(price_data),
        store_unit_price=store_unit_price,
        store_unit=store_unit,
        image_url=image_url or None,
    )
