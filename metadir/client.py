"""HTTP client for a running metadir service."""

from __future__ import annotations

from typing import Any, Optional

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"


class MetadataClient:
    """Thin wrapper over the ``/v1`` endpoints.

    Responses are returned as decoded JSON: a record dict or a list of
    them on success, an error message string on failure.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)

    def create(self, payload: bytes | str) -> Any:
        """POST a YAML or JSON payload to ``/v1/metadata``."""
        resp = self._http.post("/v1/metadata", content=payload)
        resp.raise_for_status()
        return resp.json()

    def query(self, source: str = "", company: str = "", title: str = "") -> Any:
        """GET ``/v1`` with whichever filters are supplied."""
        params = {k: v for k, v in (("source", source), ("company", company), ("title", title)) if v}
        resp = self._http.get("/v1", params=params)
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> MetadataClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
