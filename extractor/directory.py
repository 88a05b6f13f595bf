# extractor/directory.py
from __future__ import annotations
import logging
import re
from typing import List, Optional

import httpx

from finder.config import FinderSettings
from finder.core import Person, TransientFetchError

logger = logging.getLogger(__name__)

# One match per resident card in the directory listing
_PERSON_RE = re.compile(
    r"(\d+)\.</font>\s*(.*?)\s*</th[\s\S]*?"
    r"Login:[\s\S]*?<td>\s*(\w+?)\s*</td[\s\S]*?"
    r"Blok:[\s\S]*?td>\s*([A-D]\d+)\s*</[\s\S]*?"
    r"E-mail:[\s\S]*?<td>\s*([\w\-.@]+?)\s*</td[\s\S]*?"
    r"Pokoj:[\s\S]*?td>\s*(\d+)\s*</td"
)


# ---------- HTML parsing ----------

def parse_people(html: str) -> List[Person]:
    """Scrape every resident card out of a directory result page"""
    return [
        Person(
            number=int(m.group(1)),
            fullname=m.group(2),
            login=m.group(3),
            block=m.group(4),
            email=m.group(5),
            room=m.group(6),
        )
        for m in _PERSON_RE.finditer(html)
    ]


# ---------- Record source ----------

class DirectorySource:
    """
    Record source backed by the dormitory directory search form.

    Usage:
        async with DirectorySource(settings) as source:
            people = await source.fetch("B02-218")
    """

    def __init__(self, settings: FinderSettings, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "DirectorySource":
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.timeout,
                headers={"User-Agent": self.settings.user_agent},
            )
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, query: str) -> List[Person]:
        """
        POST one free-text search and parse the listing.

        Raises:
            TransientFetchError: on any transport or HTTP status error
        """
        if self._client is None:
            raise RuntimeError("DirectorySource is not open; use 'async with'")

        try:
            r = await self._client.post(self.settings.endpoint, data={"str": query})
            r.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug("Query %s failed: %s", query, e)
            raise TransientFetchError(query, e) from e

        people = parse_people(r.text)
        logger.debug("Query %s returned %d people", query, len(people))
        return people
