"""
Stable Merge Sort over Person records

Used twice per run:
1. By id, so the propagation engine can binary-search meeting participants
2. By probability, so the reporter can walk from highest to lowest risk

Top-down: split into n // 2 and n - n // 2, sort each half, merge through a
single draft buffer of size n. O(n log n) time, O(n) auxiliary space.
"""
from typing import List, Sequence

from ..etl.records import Person, RecordStore, SortKey
from .comparators import Comparator, get_comparator


def _merge(records: List[Person], draft: List[Person], start: int, mid: int, end: int,
           compare: Comparator):
    """Merge records[start:mid] and records[mid:end], both already sorted"""
    draft[start:end] = records[start:end]
    left, right = start, mid
    out = start
    while left < mid and right < end:
        # Right wins only when strictly smaller, which keeps ties in input order
        if compare(draft[right], draft[left]) < 0:
            records[out] = draft[right]
            right += 1
        else:
            records[out] = draft[left]
            left += 1
        out += 1
    while left < mid:
        records[out] = draft[left]
        left += 1
        out += 1
    while right < end:
        records[out] = draft[right]
        right += 1
        out += 1


def _merge_sort(records: List[Person], draft: List[Person], start: int, end: int,
                compare: Comparator):
    length = end - start
    if length <= 1:
        return
    mid = start + length // 2
    _merge_sort(records, draft, start, mid, compare)
    _merge_sort(records, draft, mid, end, compare)
    _merge(records, draft, start, mid, end, compare)


def merge_sort(records: Sequence[Person], compare: Comparator) -> List[Person]:
    """
    Return a new list with `records` ordered by `compare`.

    Args:
        records: Records in any order (may be empty)
        compare: Three-way comparator, negative when the first is smaller

    Returns:
        Sorted copy; equal elements keep their relative input order
    """
    result = list(records)
    if len(result) <= 1:
        return result
    draft: List[Person] = [None] * len(result)
    _merge_sort(result, draft, 0, len(result), compare)
    return result


def sort_store(store: RecordStore, key: SortKey) -> RecordStore:
    """Reorder the store in place by `key` and return it"""
    store.replace(merge_sort(store.records(), get_comparator(key)), ordering=key)
    return store
