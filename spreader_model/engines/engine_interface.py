"""
Common Interface for Propagation Engines
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Set
import math

import pandas as pd


@dataclass
class TransmissionEvent:
    """One processed meeting row and its effect on the infected person"""
    row: int                      # 1-based line number in the meetings file
    infector_id: int
    infected_id: int
    distance: float
    time: float
    transmission: float           # Per-meeting probability, prior-independent
    previous_probability: float   # Infected person's value before this row
    new_probability: float        # Value written by this row

    def is_degenerate(self) -> bool:
        """Zero distance or any other non-finite outcome"""
        return self.distance == 0 or not math.isfinite(self.transmission)


@dataclass
class PropagationResult:
    """Complete result from a propagation run"""
    method: str
    sick_id: Optional[int]

    # Per-row results, in processing order
    events: List[TransmissionEvent] = field(default_factory=list)

    def get_events_for(self, person_id: int) -> List[TransmissionEvent]:
        """All rows that named `person_id` as the infected party"""
        return [e for e in self.events if e.infected_id == person_id]

    def get_overwritten_ids(self) -> Set[int]:
        """
        Ids that were infected by more than one row.

        Only the last of those rows determines the final probability.
        """
        seen: Set[int] = set()
        repeated: Set[int] = set()
        for event in self.events:
            if event.infected_id in seen:
                repeated.add(event.infected_id)
            seen.add(event.infected_id)
        return repeated

    def get_degenerate_events(self) -> List[TransmissionEvent]:
        return [e for e in self.events if e.is_degenerate()]

    def to_frame(self) -> pd.DataFrame:
        """Event trail as a DataFrame, one row per meeting"""
        columns = [
            'row', 'infector_id', 'infected_id', 'distance', 'time',
            'transmission', 'previous_probability', 'new_probability'
        ]
        return pd.DataFrame([
            (e.row, e.infector_id, e.infected_id, e.distance, e.time,
             e.transmission, e.previous_probability, e.new_probability)
            for e in self.events
        ], columns=columns)


class PropagationModel(ABC):
    """Abstract base class for propagation engines"""

    @abstractmethod
    def run(self, store, stream, progress: bool = False) -> PropagationResult:
        """
        Propagate infection probabilities through the meetings stream.

        Args:
            store: RecordStore sorted by id, mutated in place
            stream: MeetingsStream from the data loader
            progress: Show a progress bar over the meetings

        Returns:
            PropagationResult describing every processed row
        """
        pass

    @abstractmethod
    def get_method_name(self) -> str:
        """Return the name of the transmission model"""
        pass
