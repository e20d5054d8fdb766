"""
Binary search of an id-sorted record sequence.
"""
from typing import Optional, Sequence

from ..errors import RecordNotFoundError
from ..etl.records import Person


def find_by_id(records: Sequence[Person], target: int, lo: int = 0,
               hi: Optional[int] = None) -> int:
    """
    Find the position of the record whose id is `target`.

    Args:
        records: Records sorted ascending by id
        target: Id to look up
        lo: First index of the searched range (inclusive)
        hi: Last index of the searched range (inclusive), defaults to the end

    Returns:
        Index i with records[i].id == target

    Raises:
        RecordNotFoundError: if the range is empty or holds no such id
    """
    if hi is None:
        hi = len(records) - 1
    lo = max(lo, 0)
    hi = min(hi, len(records) - 1)

    while lo <= hi:
        mid = lo + (hi - lo) // 2
        mid_id = records[mid].id
        if mid_id == target:
            return mid
        if target < mid_id:
            hi = mid - 1
        else:
            lo = mid + 1

    raise RecordNotFoundError(target)
