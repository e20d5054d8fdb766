# Engines Module: ordering, lookup and propagation
from .comparators import compare_by_id, compare_by_probability, is_at_least
from .merge_sort import merge_sort, sort_store
from .binary_search import find_by_id
from .propagation import PropagationEngine, propagate, transmission_probability
from .engine_interface import PropagationModel, PropagationResult, TransmissionEvent

__all__ = [
    'compare_by_id',
    'compare_by_probability',
    'is_at_least',
    'merge_sort',
    'sort_store',
    'find_by_id',
    'PropagationEngine',
    'propagate',
    'transmission_probability',
    'PropagationModel',
    'PropagationResult',
    'TransmissionEvent'
]
