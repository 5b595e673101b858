from __future__ import annotations

from dataclasses import dataclass, field
import requests


@dataclass(frozen=True)
class HttpClient:
    base_url: str
    timeout_s: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)

    def get(self, path: str, *, params: dict | None = None) -> requests.Response:
        url = self.base_url.rstrip("/") + "/" + path.lstrip("/")
        return requests.get(
            url,
            params=params,
            headers={"Accept": "application/json", **self.headers},
            timeout=self.timeout_s,
        )
