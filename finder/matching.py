"""
Consumers fed by the batch fetcher: find-by-name and dump-all
"""
from __future__ import annotations
import logging
from typing import List

from finder.core import Person, _norm
from finder.output import OutputWriter

logger = logging.getLogger(__name__)


class NameMatcher:
    """
    Find people whose name or login contains `name` (case and diacritics insensitive).

    Without `multiple` the first match is written and the run is stopped.

    Example:
        >>> matcher = NameMatcher("tomas", writer, multiple=True)
        >>> matcher([Person(1, "Tomáš Novák", "B02", "218", "xnovak00", "x@vut.cz")])
        False
    """

    def __init__(self, name: str, output: OutputWriter, multiple: bool = False):
        self.needle = _norm(name)
        if not self.needle:
            raise ValueError("Name to find cannot be empty")
        self.output = output
        self.multiple = multiple
        self.found = 0

    def matches(self, person: Person) -> bool:
        return self.needle in _norm(person.fullname) or self.needle in _norm(person.login)

    def __call__(self, people: List[Person]) -> bool:
        hits = [p for p in people if self.matches(p)]
        logger.info("Fetched %d people, %d match the filter.", len(people), len(hits))
        if not hits:
            return False

        if self.multiple:
            for p in hits:
                self.output.write(p)
            self.found += len(hits)
            return False

        self.output.write(hits[0])
        self.found += 1
        return True


class Dumper:
    """Write every fetched person; never stops the run"""

    def __init__(self, output: OutputWriter):
        self.output = output
        self.dumped = 0

    def __call__(self, people: List[Person]) -> bool:
        logger.info("Fetched %d people.", len(people))
        for p in people:
            self.output.write(p)
        self.dumped += len(people)
        return False
