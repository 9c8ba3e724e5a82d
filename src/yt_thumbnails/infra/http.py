"""HTTP client helpers for talking to the thumbnail image host."""
from __future__ import annotations

from typing import Optional

import httpx


def create_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Create the async HTTP client used for existence checks and downloads.

    Parameters
    ----------
    transport: Optional[httpx.AsyncBaseTransport]
        Transport override, e.g. ``httpx.MockTransport`` in tests.

    Notes
    -----
    - Redirects are followed so a moved image still counts as existing.
    - Keeps httpx's default timeout; no retries are configured.
    - Callers own the client and must close it (``async with``).
    """

    return httpx.AsyncClient(follow_redirects=True, transport=transport)
