"""
Record types shared by the loader, the engines and the reporter.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator, List, NamedTuple, Optional

import pandas as pd


class SortKey(Enum):
    """Orderings a RecordStore can be in"""
    ID = auto()            # ascending id, required by the lookup engine
    PROBABILITY = auto()   # ascending probability, required by the reporter


@dataclass
class Person:
    """One individual seen in the videos"""
    name: str
    id: int
    age: float
    probability: float = 0.0


class Meeting(NamedTuple):
    """A single recorded contact, infector first"""
    infector_id: int
    infected_id: int
    distance: float
    time: float


@dataclass
class MeetingsStream:
    """Parsed meetings input: the sick id followed by the contact rows"""
    sick_id: Optional[int] = None
    meetings: List[Meeting] = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.sick_id is None

    def __len__(self) -> int:
        return len(self.meetings)


class RecordStore:
    """
    Ordered, growable collection of Person records.

    The store owns its records. Sorting replaces the contents wholesale and
    records which ordering the store is in, so consumers can check their
    precondition instead of trusting the caller.
    """

    def __init__(self, people: Optional[Iterable[Person]] = None):
        self._people: List[Person] = []
        self.ordering: Optional[SortKey] = None
        if people is not None:
            self.extend(people)

    def append(self, person: Person):
        self._people.append(person)
        self.ordering = None

    def extend(self, people: Iterable[Person]):
        for person in people:
            self.append(person)

    def replace(self, people: List[Person], ordering: Optional[SortKey] = None):
        """Swap in a reordering of the same records"""
        if len(people) != len(self._people):
            raise ValueError(
                f"Replacement holds {len(people)} records, store holds {len(self._people)}"
            )
        self._people = list(people)
        self.ordering = ordering

    def records(self) -> List[Person]:
        """Shallow copy of the records in their current order"""
        return list(self._people)

    def ids(self) -> List[int]:
        return [p.id for p in self._people]

    def to_frame(self) -> pd.DataFrame:
        """Records as a DataFrame, in the store's current order"""
        return pd.DataFrame(
            [(p.name, p.id, p.age, p.probability) for p in self._people],
            columns=['name', 'id', 'age', 'probability']
        )

    def __len__(self) -> int:
        return len(self._people)

    def __iter__(self) -> Iterator[Person]:
        return iter(self._people)

    def __getitem__(self, index: int) -> Person:
        return self._people[index]

    def __repr__(self) -> str:
        ordering = self.ordering.name if self.ordering else None
        return f"RecordStore(size={len(self._people)}, ordering={ordering})"
