"""Simple HTTP client utilities using httpx.

The Hugging Face and public providers share this helper for their
outbound JSON requests.  Tests inject an ``httpx.MockTransport`` through
``transport``.
"""

from __future__ import annotations

import httpx
from typing import Any, Dict, Optional


async def post(
    url: str,
    json: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """Perform an asynchronous HTTP POST request.

    ``timeout=None`` disables httpx's default timeout so a slow upstream
    is waited on for as long as it takes.
    """
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        return await client.post(url, json=json, headers=headers)
