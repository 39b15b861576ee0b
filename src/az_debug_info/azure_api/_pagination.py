"""ARM pagination helper."""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)


def paginate(url: str, headers: dict[str, str], timeout: int = 30) -> list[dict]:
    """Fetch every page of an ARM list endpoint and return the merged values.

    Pages are followed through ``nextLink`` until the service stops
    returning one.
    """
    items: list[dict] = []
    next_url: str | None = url
    page = 0
    while next_url:
        resp = requests.get(next_url, headers=headers, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
        values = data.get("value") or []
        page += 1
        logger.debug("Fetched page %d with %d items from %s", page, len(values), next_url)
        items.extend(values)
        next_url = data.get("nextLink")
    return items
