"""
Three-way comparators for Person records.

Each comparator returns a negative number, zero or a positive number, the
contract the merge sort relies on.
"""
from typing import Callable

from ..config import CLASSIFIER_CONFIG
from ..etl.records import Person, SortKey

EQUAL = 0
GREATER = 1
SMALLER = -1

Comparator = Callable[[Person, Person], int]


def compare_by_id(a: Person, b: Person) -> int:
    """Numeric ascending comparison on id"""
    if a.id == b.id:
        return EQUAL
    return GREATER if a.id > b.id else SMALLER


def compare_probabilities(p: float, q: float, epsilon: float = CLASSIFIER_CONFIG.EPSILON) -> int:
    """
    Epsilon-tolerant comparison of two probabilities.

    NaN is neither within epsilon of nor greater than anything, so it
    compares as smaller on both sides.
    """
    if abs(p - q) < epsilon:
        return EQUAL
    elif p > q:
        return GREATER
    else:
        return SMALLER


def compare_by_probability(a: Person, b: Person, epsilon: float = CLASSIFIER_CONFIG.EPSILON) -> int:
    """Ascending comparison on probability, equal within epsilon"""
    return compare_probabilities(a.probability, b.probability, epsilon)


def is_at_least(value: float, threshold: float, epsilon: float = CLASSIFIER_CONFIG.EPSILON) -> bool:
    """value >= threshold, counting values within epsilon of it"""
    return value >= threshold or abs(value - threshold) < epsilon


COMPARATORS = {
    SortKey.ID: compare_by_id,
    SortKey.PROBABILITY: compare_by_probability,
}


def get_comparator(key: SortKey) -> Comparator:
    return COMPARATORS[key]
