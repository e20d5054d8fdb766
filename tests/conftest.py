"""
Shared fixtures: input files on disk and ready-made record stores.
"""
import pytest

from spreader_model.engines.merge_sort import sort_store
from spreader_model.etl.records import Meeting, MeetingsStream, Person, RecordStore, SortKey


@pytest.fixture
def write_inputs(tmp_path):
    """Write People.in / Meetings.in and return their paths"""
    def _write(people: str, meetings: str):
        people_path = tmp_path / "People.in"
        meetings_path = tmp_path / "Meetings.in"
        people_path.write_text(people)
        meetings_path.write_text(meetings)
        return people_path, meetings_path
    return _write


@pytest.fixture
def people():
    return [
        Person("Dana", 40, 70.0),
        Person("Alice", 10, 30.0),
        Person("Carol", 30, 25.0),
        Person("Bob", 20, 66.0),
        Person("Eve", 50, 12.0),
    ]


@pytest.fixture
def id_sorted_store(people):
    return sort_store(RecordStore(people), SortKey.ID)


@pytest.fixture
def stream_of():
    """Build a MeetingsStream from a sick id and (infector, infected, distance, time) rows"""
    def _stream(sick_id, *rows):
        return MeetingsStream(sick_id=sick_id, meetings=[Meeting(*row) for row in rows])
    return _stream
