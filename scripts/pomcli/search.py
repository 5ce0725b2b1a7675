"""Maven Central search client.

Thin wrapper around the Solr endpoint behind search.maven.org. Each call is
a single GET; failures are raised to the caller without retries.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .coordinates import QuerySpec

logger = logging.getLogger(__name__)

# Default endpoint and timeout (overridable via env vars)
SEARCH_URL = os.environ.get("POMCLI_SEARCH_URL", "https://search.maven.org/solrsearch/select")
DEFAULT_TIMEOUT = 30.0


def search_timeout() -> float:
    """Read ``POMCLI_SEARCH_TIMEOUT``, falling back to the default when unset or malformed."""
    raw = os.environ.get("POMCLI_SEARCH_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid POMCLI_SEARCH_TIMEOUT=%r, using %ss", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT


@dataclass(frozen=True)
class SearchRequest:
    """Parameters of one Solr search.

    Attributes:
        q: Solr query, e.g. ``g:"org.slf4j" AND a:"slf4j-api"``.
        fq: Optional filter query.
        sort: Optional sort clause.
        start: Offset of the first result.
        rows: Maximum number of results.
    """
    q: str
    fq: Optional[str] = None
    sort: Optional[str] = None
    start: int = 0
    rows: int = 20

    def params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"q": self.q, "start": self.start, "rows": self.rows, "wt": "json"}
        if self.fq:
            params["fq"] = self.fq
        if self.sort:
            params["sort"] = self.sort
        return params


@dataclass(frozen=True)
class SearchDocument:
    """One artifact returned by the search index."""

    group_id: str
    artifact_id: str
    latest_version: Optional[str]
    version_count: int = 0

    @classmethod
    def from_json(cls, doc: dict[str, Any]) -> SearchDocument:
        # Artifact searches report ``latestVersion``; GAV searches report ``v``.
        return cls(
            group_id=doc.get("g", ""),
            artifact_id=doc.get("a", ""),
            latest_version=doc.get("latestVersion") or doc.get("v"),
            version_count=int(doc.get("versionCount", 0)),
        )


class SolrSearch:
    """Synchronous client for the Maven Central Solr search API."""

    def __init__(
        self,
        base_url: str = SEARCH_URL,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        if timeout is None:
            timeout = search_timeout()
        self._client = httpx.Client(timeout=timeout, transport=transport)

    # ── lifecycle ──────────────────────────────────────────────────────────

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SolrSearch:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── public ─────────────────────────────────────────────────────────────

    def search(self, request: SearchRequest) -> list[SearchDocument]:
        """Run ``request`` and return the matching documents in index order.

        Raises:
            httpx.HTTPError: On transport failures, non-2xx responses and
                bodies that are not JSON.
        """
        logger.debug("GET %s q=%s rows=%d", self.base_url, request.q, request.rows)
        response = self._client.get(self.base_url, params=request.params())
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as e:
            raise httpx.DecodingError(
                f"Invalid JSON from {self.base_url}: {e}", request=response.request
            ) from e
        docs = payload.get("response", {}).get("docs", [])
        return [SearchDocument.from_json(d) for d in docs]


def get_latest_version(search: SolrSearch, spec: QuerySpec) -> Optional[str]:
    """Look up the latest version of ``spec``'s artifact.

    Asks the index for the single best exact group+artifact match.

    Returns:
        The latest version, or ``None`` if the index has no match.

    Raises:
        ValueError: If ``spec`` lacks a groupId or artifactId.
    """
    if not spec.group_id or not spec.artifact_id:
        raise ValueError("groupId and artifactId is required")
    docs = search.search(SearchRequest(q=str(spec), start=0, rows=1))
    return docs[0].latest_version if docs else None
