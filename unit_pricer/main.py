from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path

from .config import DEFAULT_REPORT_PATH, REQUIRED_KEYS, Config, report_path
from .match import choose_best, find_better_deals
from .models import Candidate, CatalogItem
from .normalize import normalize
from .report import ItemReport, build_report
from .rules import CATEGORY_RULES
from .target import TargetClient
from .text import parse_price

__version__ = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="unit-pricer")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = p.add_subparsers(dest="cmd", required=False)

    p_norm = sub.add_parser("normalize", help="Compute the unit price of one product name")
    p_norm.add_argument("name", help="Product name, e.g. 'Nautica Voyage EDT (6.7 oz)'")
    p_norm.add_argument("price", help="Total price, e.g. 25.37 or '$25.37'")
    p_norm.add_argument("--json", action="store_true", help="Print the result as JSON")

    sub.add_parser("rules", help="List category rules in priority order")

    p_config = sub.add_parser("config", help="Config commands")
    sub_config = p_config.add_subparsers(dest="config_cmd", required=True)
    sub_config.add_parser("keys", help="List required environment variables")
    sub_config.add_parser("check", help="Validate the environment is filled")

    p_target = sub.add_parser("target", help="Target commands")
    sub_target = p_target.add_subparsers(dest="target_cmd", required=True)
    p_search = sub_target.add_parser("search", help="Search Target and show unit prices")
    p_search.add_argument("term", help="Search term (e.g. 'cat litter 40 lb')")
    p_search.add_argument("--limit", type=int, default=10, help="Max results")

    p_batch = sub.add_parser("batch", help="Normalize a JSON file of {name, price} items")
    p_batch.add_argument("file", help="JSON list of objects with 'name' and 'price'")
    p_batch.add_argument("--out", default=None, help=f"Report path (default {DEFAULT_REPORT_PATH})")

    p_deals = sub.add_parser("deals", help="List competitor offers cheaper than the catalog price")
    p_deals.add_argument("file", help="JSON object with 'catalog' list and 'offers' {id: {store: listing}}")
    p_deals.add_argument("--store", default=None, help="Only this store (e.g. target)")

    return p


def _parse_price_arg(raw: str) -> float | None:
    try:
        return float(raw)
    except ValueError:
        return parse_price(raw)


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.version:
        print(__version__)
        return 0

    if args.cmd is None:
        p.print_help()
        return 0

    if args.cmd == "normalize":
        result = normalize(args.name, _parse_price_arg(args.price))
        if result is None:
            print("No unit price (no category rule matched).")
            return 1
        if args.json:
            print(json.dumps(result.as_dict()))
        else:
            print(f"{result.formatted}  ({result.count:g} {result.unit})")
        return 0

    if args.cmd == "rules":
        for i, rule in enumerate(CATEGORY_RULES, 1):
            print(f"{i:>2}. {rule.match_pattern.pattern:<22} → {rule.unit:<10} {rule.quantity_pattern.pattern}")
        return 0

    if args.cmd == "config":
        if args.config_cmd == "keys":
            for k in REQUIRED_KEYS:
                print(k)
            return 0

        if args.config_cmd == "check":
            try:
                Config.load_from_env()
            except RuntimeError as exc:
                print(f"ERROR: {exc}")
                return 1
            print("OK: environment config present")
            return 0

    if args.cmd == "target":
        if args.target_cmd == "search":
            return _run_target_search(args)

    if args.cmd == "batch":
        return _run_batch(args)

    if args.cmd == "deals":
        return _run_deals(args)

    raise RuntimeError("unreachable")


def _run_target_search(args) -> int:
    try:
        cfg = Config.load_from_env()
        client = TargetClient(api_key=cfg.target_api_key, store_id=cfg.target_store_id)
        candidates = client.search(args.term, count=args.limit)
    except RuntimeError as exc:
        print(f"ERROR: {exc}")
        return 1

    if not candidates:
        print("No results found.")
        return 1

    for i, c in enumerate(candidates, 1):
        up = normalize(c.title, c.price)
        price = f"${c.price:.2f}" if c.price is not None else "N/A"
        print(f"{i}. {c.title}")
        print(f"   Price: {price}  Unit: {up.formatted if up else 'N/A'}")
        if c.store_unit_price is not None:
            print(f"   Store unit price: ${c.store_unit_price}/{c.store_unit}")
        print(f"   URL: {c.url}")
        print()

    chosen = choose_best(candidates)
    if chosen is not None:
        tag = chosen.unit_price.formatted if chosen.unit_price else "no unit price"
        print(f"BEST: {chosen.candidate.title}  ({tag})")
    return 0


def _item_report(row: dict) -> ItemReport:
    name = row.get("name") or ""
    raw_price = row.get("price")
    price = _parse_price_arg(str(raw_price)) if raw_price is not None else None
    _id = row.get("id")

    if not name or price is None or not math.isfinite(price) or price <= 0:
        status = "INVALID"
        result = None
    else:
        result = normalize(name, price)
        status = "NORMALIZED" if result else "NO_UNIT_PRICE"

    return ItemReport(
        id=str(_id) if _id is not None else None,
        name=name,
        price=price,
        unit_price=result.unit_price if result else None,
        unit=result.unit if result else None,
        count=result.count if result else None,
        formatted=result.formatted if result else None,
        status=status,
    )


def _run_batch(args) -> int:
    try:
        rows = json.loads(Path(args.file).read_text())
    except (OSError, ValueError) as exc:
        print(f"ERROR: could not read {args.file}: {exc}")
        return 1
    if not isinstance(rows, list):
        print(f"ERROR: {args.file} must hold a JSON list")
        return 1

    items = [_item_report(row) for row in rows if isinstance(row, dict)]
    print(f"Read {len(items)} items from {args.file}.")

    report = build_report(items)
    print("\n" + report.summary_text())
    path = report.write_json(args.out or report_path())
    print(f"\nReport written to {path}")
    return 0


def _price_field(raw) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    return parse_price(str(raw))


def _run_deals(args) -> int:
    try:
        data = json.loads(Path(args.file).read_text())
    except (OSError, ValueError) as exc:
        print(f"ERROR: could not read {args.file}: {exc}")
        return 1
    if not isinstance(data, dict):
        print(f"ERROR: {args.file} must hold a JSON object")
        return 1

    catalog = [
        CatalogItem(
            id=str(row.get("id")),
            name=str(row.get("name") or ""),
            subscribe_price=_price_field(row.get("subscribe_price")),
            one_time_price=_price_field(row.get("one_time_price")),
        )
        for row in data.get("catalog") or []
        if isinstance(row, dict) and row.get("id") is not None
    ]
    offers: dict[str, dict[str, Candidate]] = {}
    for item_id, stores in (data.get("offers") or {}).items():
        if not isinstance(stores, dict):
            continue
        offers[str(item_id)] = {
            store: Candidate(
                title=str(row.get("title") or row.get("name") or ""),
                url=str(row.get("url") or ""),
                price=_price_field(row.get("price")),
            )
            for store, row in stores.items()
            if isinstance(row, dict)
        }

    deals = find_better_deals(catalog, offers, store=args.store)
    if not deals:
        print("No better deals found.")
        return 0

    for i, d in enumerate(deals, 1):
        print(f"{i}. [{d.store}] {d.item_name}")
        print(f"   ${d.competitor_price:.2f} vs ${d.catalog_price:.2f}  "
              f"save ${d.savings:.2f} ({d.savings_pct}%)  {d.competitor_unit_price}")
        print(f"   URL: {d.competitor_url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
