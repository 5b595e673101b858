from __future__ import annotations

import os
from dataclasses import dataclass

from .target import DEFAULT_STORE_ID


REQUIRED_KEYS = [
    "TARGET_API_KEY",
]

DEFAULT_REPORT_PATH = "artifacts/unit_prices.json"


@dataclass(frozen=True)
class Config:
    target_api_key: str
    target_store_id: str = DEFAULT_STORE_ID

    @staticmethod
    def load_from_env(env: dict[str, str] | None = None) -> "Config":
        source = os.environ if env is None else env

        values: dict[str, str] = {}
        for k in REQUIRED_KEYS:
            val = source.get(k)
            if val is None:
                raise RuntimeError(f"Missing environment variable: {k}")
            if not val.strip() or val.strip() in {"PLACEHOLDER", "MASKED"}:
                raise RuntimeError(f"Environment variable {k} is still a placeholder")
            values[k] = val.strip()

        return Config(
            target_api_key=values["TARGET_API_KEY"],
            target_store_id=source.get("TARGET_STORE_ID") or DEFAULT_STORE_ID,
        )


def report_path(env: dict[str, str] | None = None) -> str:
    """Where batch reports go; needs no credentials."""
    source = os.environ if env is None else env
    return source.get("UNIT_PRICER_REPORT_PATH") or DEFAULT_REPORT_PATH
