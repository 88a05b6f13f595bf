# extractor/cache.py
from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Iterable, List

from finder.core import CacheLoadError, Person


def load_cache(path: Path) -> List[Person]:
    """
    Load a JSON dump (array of person objects) produced by `dump --format json`.

    Raises:
        CacheLoadError: file unreadable, not JSON, not an array, or a bad entry
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CacheLoadError(f"Couldn't load or parse input file {path}: {e}") from e

    if not isinstance(raw, list):
        raise CacheLoadError(f"Input file {path} must contain a JSON array")

    people = []
    for i, item in enumerate(raw):
        try:
            people.append(Person.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise CacheLoadError(f"Malformed record #{i} in {path}: {e!r}") from e
    return people


class RecordCache:
    """Pre-loaded records answering room-code lookups without the network"""

    def __init__(self, people: Iterable[Person]):
        self._by_query: Dict[str, List[Person]] = {}
        for p in people:
            self._by_query.setdefault(p.query, []).append(p)

    @classmethod
    def from_file(cls, path: Path) -> "RecordCache":
        return cls(load_cache(path))

    def __len__(self):
        return sum(len(v) for v in self._by_query.values())

    def lookup(self, query: str) -> List[Person]:
        """Records living in `query`, in file order; empty when none"""
        return list(self._by_query.get(query, []))
