"""
Sequential Probability Propagation Engine

State machine over the meetings stream:
- Initial: every probability is 0, the sick person is seeded with 1
- Transition: for each row (infector, infected, distance, time)
    transmission = (time * MIN_DISTANCE) / (distance * MAX_TIME)
    P(infected) = P(infector) * transmission       (overwrite, not accumulate)
- Terminal: end of stream, last written values are final

Rows are assumed to arrive in infection order, so an infector's probability
is already final when it is read. Zero distance is not guarded: it yields an
infinite (or NaN) transmission, reported as a DegenerateMeetingWarning.
"""
import warnings

import numpy as np
from tqdm import tqdm

from ..config import PROPAGATION_CONFIG, PropagationConfig
from ..errors import DegenerateMeetingWarning, RecordNotFoundError, UnknownParticipantError
from ..etl.records import MeetingsStream, RecordStore, SortKey
from .binary_search import find_by_id
from .engine_interface import PropagationModel, PropagationResult, TransmissionEvent


def transmission_probability(distance: float, time: float,
                             config: PropagationConfig = PROPAGATION_CONFIG) -> float:
    """
    Per-meeting infection probability.

    Grows with meeting duration and shrinks with distance. The raw ratio is
    unbounded above 1; it is clipped into [0, 1] only when the config asks.
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        numerator = np.float64(time) * config.MIN_DISTANCE
        denominator = np.float64(distance) * config.MAX_TIME
        value = numerator / denominator
    if config.CLAMP_PROBABILITY:
        value = np.clip(value, 0.0, 1.0)
    return float(value)


class PropagationEngine(PropagationModel):
    """
    Distance/duration transmission model over a single sick source.

    The store must be sorted by id; participants are resolved with a binary
    search per row, so a run costs O(m log n) for m meetings and n people.
    """

    def __init__(self, config: PropagationConfig = PROPAGATION_CONFIG):
        self.config = config

    def get_method_name(self) -> str:
        return "distance_time"

    def _resolve(self, store: RecordStore, person_id: int, row=None) -> int:
        try:
            return find_by_id(store, person_id)
        except RecordNotFoundError:
            raise UnknownParticipantError(person_id, row=row) from None

    def run(self, store: RecordStore, stream: MeetingsStream,
            progress: bool = False) -> PropagationResult:
        if store.ordering is not SortKey.ID:
            raise ValueError("Propagation requires a store sorted by id")

        result = PropagationResult(method=self.get_method_name(), sick_id=stream.sick_id)

        for person in store:
            person.probability = 0.0

        if stream.is_empty():
            return result

        store[self._resolve(store, stream.sick_id)].probability = 1.0

        # Line 1 of the meetings file holds the sick id
        rows = enumerate(stream.meetings, start=2)
        for row, meeting in tqdm(rows, total=len(stream), desc="Propagating",
                                 disable=not progress):
            infector = store[self._resolve(store, meeting.infector_id, row)]
            infected = store[self._resolve(store, meeting.infected_id, row)]

            transmission = transmission_probability(meeting.distance, meeting.time, self.config)
            previous = infected.probability
            infected.probability = infector.probability * transmission

            event = TransmissionEvent(
                row=row,
                infector_id=meeting.infector_id,
                infected_id=meeting.infected_id,
                distance=meeting.distance,
                time=meeting.time,
                transmission=transmission,
                previous_probability=previous,
                new_probability=infected.probability
            )
            if event.is_degenerate():
                warnings.warn(
                    f"Meeting row {row} ({meeting.infector_id} -> {meeting.infected_id}): "
                    f"distance {meeting.distance} gives transmission {transmission}",
                    DegenerateMeetingWarning
                )
            result.events.append(event)

        return result


def propagate(store: RecordStore, stream: MeetingsStream,
              config: PropagationConfig = PROPAGATION_CONFIG) -> RecordStore:
    """Run the propagation engine and return the mutated store"""
    PropagationEngine(config).run(store, stream)
    return store
