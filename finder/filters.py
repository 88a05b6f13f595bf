"""
Filter compiler: turns a sparse room/block filter into room-code queries
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from finder.core import FilterValidationError, EmptyResultError


# Block type -> valid block numbers. Order matters: it drives query order.
BLOCK_TYPES: Dict[str, List[int]] = {
    "A": [2, 3, 4, 5],  # Koleje pod Palackeho vrchem
    "B": [2, 4, 5, 7],  # Purkynovy koleje
    "C": [1, 2, 3],     # Listovy koleje
    "D": [1, 2],        # Manesovy koleje
}

FLOORS = range(2, 10)
ROOMS_PER_FLOOR = 50
MIN_FLOOR, MAX_FLOOR = 1, 9


@dataclass(frozen=True)
class QueryFilter:
    """
    Conjunction of optional constraints.

    Example:
        QueryFilter(block="B02", room=218)        # one room
        QueryFilter(block_type="A", floor=3)      # 3rd floor of every A block
        QueryFilter(block_number=2)               # A02, B02, C02, D02
    """
    block: Optional[str] = None
    room: Optional[int] = None
    floor: Optional[int] = None
    block_type: Optional[str] = None
    block_number: Optional[int] = None

    @property
    def normalized_type(self) -> Optional[str]:
        return self.block_type.upper() if self.block_type else None


def block_code(block_type: str, number: int) -> str:
    return f"{block_type.upper()}{number:02d}"


def room_suffix(room: int) -> str:
    return f"-{room:03d}"


def _validate(f: QueryFilter):
    btype = f.normalized_type

    if btype is not None:
        if btype not in BLOCK_TYPES:
            raise FilterValidationError(f"Unknown block type: {f.block_type}")
        if f.block_number is not None and f.block_number not in BLOCK_TYPES[btype]:
            raise FilterValidationError(
                f"Block type {btype} has no block number {f.block_number}"
            )

    if f.block_number is not None:
        if not any(f.block_number in numbers for numbers in BLOCK_TYPES.values()):
            raise FilterValidationError(
                f"Block number {f.block_number} does not exist in any block type"
            )

    if f.floor is not None and not (MIN_FLOOR <= f.floor <= MAX_FLOOR):
        raise FilterValidationError(
            f"Invalid floor number: {f.floor} (expected {MIN_FLOOR}-{MAX_FLOOR})"
        )

    if f.room is not None and f.room < 0:
        raise FilterValidationError(f"Invalid room number: {f.room}")


def _block_codes(f: QueryFilter) -> List[str]:
    btype = f.normalized_type

    if f.block:
        return [f.block.upper()]
    if btype and f.block_number is not None:
        return [block_code(btype, f.block_number)]
    if btype:
        return [block_code(btype, n) for n in BLOCK_TYPES[btype]]
    if f.block_number is not None:
        return [
            block_code(t, f.block_number)
            for t, numbers in BLOCK_TYPES.items()
            if f.block_number in numbers
        ]
    return [block_code(t, n) for t, numbers in BLOCK_TYPES.items() for n in numbers]


def _room_suffixes(f: QueryFilter) -> List[str]:
    if f.room is not None:
        return [room_suffix(f.room)]
    floors = [f.floor] if f.floor is not None else list(FLOORS)
    return [
        room_suffix(floor * 100 + n)
        for floor in floors
        for n in range(1, ROOMS_PER_FLOOR + 1)
    ]


def compile_filter(query_filter: Optional[QueryFilter]) -> List[str]:
    """
    Expand a filter into an ordered list of room codes ("B02-218").

    Order is block-major, then floor, then room, following BLOCK_TYPES.
    Overlapping blocks are not deduplicated.

    Raises:
        FilterValidationError: filter missing, unknown type, type/number
            mismatch, unknown number or floor out of range
        EmptyResultError: the filter expands to nothing
    """
    if query_filter is None or not isinstance(query_filter, QueryFilter):
        raise FilterValidationError("Invalid filter argument")

    _validate(query_filter)

    suffixes = _room_suffixes(query_filter)
    queries = [code + suffix for code in _block_codes(query_filter) for suffix in suffixes]

    # only reachable if BLOCK_TYPES lists a type without block numbers
    if not queries:
        raise EmptyResultError("Filter does not generate any queries to fetch")
    return queries
