from __future__ import annotations

import logging
from typing import Dict, List

import pytest

from finder.core import Person, TransientFetchError


@pytest.fixture(autouse=True)
def _reset_loggers():
    yield
    # the CLI detaches these loggers from the root; undo it between tests
    for name in ("finder", "extractor"):
        log = logging.getLogger(name)
        log.handlers[:] = []
        log.setLevel(logging.NOTSET)
        log.propagate = True


def make_person(block: str = "B02", room: str = "218", **overrides) -> Person:
    data = {
        "number": 1,
        "fullname": "Jan Novák",
        "block": block,
        "room": room,
        "login": "xnovak00",
        "email": "xnovak00@stud.fit.vutbr.cz",
    }
    data.update(overrides)
    return Person(**data)


class FakeSource:
    """Record source serving canned people; `failures` maps query -> attempts that fail"""

    def __init__(self, people: Dict[str, List[Person]] = None, failures: Dict[str, int] = None):
        self.people = people or {}
        self.failures = dict(failures or {})
        self.calls: List[str] = []

    async def fetch(self, query: str) -> List[Person]:
        self.calls.append(query)
        if self.failures.get(query, 0) > 0:
            self.failures[query] -= 1
            raise TransientFetchError(query)
        return list(self.people.get(query, []))


@pytest.fixture()
def person() -> Person:
    return make_person()
