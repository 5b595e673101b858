from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_REPORT_PATH


@dataclass
class ItemReport:
    id: str | None
    name: str
    price: float | None
    unit_price: float | None
    unit: str | None
    count: float | None
    formatted: str | None
    status: str  # NORMALIZED, NO_UNIT_PRICE, INVALID


@dataclass
class RunReport:
    timestamp: str
    total: int
    normalized: int
    no_unit_price: int
    invalid: int
    items: list[ItemReport]

    def summary_text(self) -> str:
        lines = [
            f"Run: {self.timestamp}",
            f"Total: {self.total}  Normalized: {self.normalized}  "
            f"No unit price: {self.no_unit_price}  Invalid: {self.invalid}",
            "",
        ]
        for i, it in enumerate(self.items, 1):
            price = f"${it.price:.2f}" if it.price is not None else "—"
            lines.append(f"  {i}. [{it.status}] {it.name}")
            lines.append(f"     → {price}  {it.formatted or ''}")
        return "\n".join(lines)

    def write_json(self, path: str = DEFAULT_REPORT_PATH) -> str:
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(asdict(self), indent=2))
        return str(out)


def build_report(items: list[ItemReport]) -> RunReport:
    return RunReport(
        timestamp=datetime.now(timezone.utc).isoformat(),
        total=len(items),
        normalized=sum(1 for i in items if i.status == "NORMALIZED"),
        no_unit_price=sum(1 for i in items if i.status == "NO_UNIT_PRICE"),
        invalid=sum(1 for i in items if i.status == "INVALID"),
        items=items,
    )
