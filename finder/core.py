"""
Kolej Finder - Core model
Person records, name normalization and the error taxonomy
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Optional
import unicodedata
import re


def _norm(s: str) -> str:
    """Normalize string for fuzzy matching (case and diacritics insensitive)"""
    s = unicodedata.normalize("NFKD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", s.lower()).strip()


class FinderError(Exception):
    """Base class for every error the finder surfaces to its caller"""


class FilterValidationError(FinderError):
    """Malformed or contradictory filter fields"""


class EmptyResultError(FinderError):
    """A valid filter that expands to zero queries"""


class CacheLoadError(FinderError):
    """Cache file is unreadable or malformed"""


class TransientFetchError(FinderError):
    """A single query's network call failed; eligible for retry"""

    def __init__(self, query: str, cause: Optional[BaseException] = None):
        self.query = query
        self.cause = cause
        detail = f": {type(cause).__name__}" if cause is not None else ""
        super().__init__(f"Fetching {query} failed{detail}")


@dataclass(frozen=True)
class Person:
    """
    One resident as listed by the directory.

    `room` stays a string, exactly as the directory prints it, so that
    `query` lines up with compiled room codes like "B02-218".
    """
    number: int
    fullname: str
    block: str
    room: str
    login: str
    email: str

    def __str__(self):
        return f"{self.fullname} ({self.login})"

    @property
    def query(self) -> str:
        """Room code this person lives in (block-room composite)"""
        return f"{self.block}-{self.room}"

    @classmethod
    def from_dict(cls, data: Dict) -> "Person":
        """Build from a JSON mapping; raises KeyError/ValueError/TypeError on bad input"""
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")
        return cls(
            number=int(data["number"]),
            fullname=str(data["fullname"]),
            block=str(data["block"]),
            room=str(data["room"]),
            login=str(data["login"]),
            email=str(data["email"]),
        )

    def to_dict(self) -> Dict:
        """Serialize to dict (for JSON export)"""
        return asdict(self)
