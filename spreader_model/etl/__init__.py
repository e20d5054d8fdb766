# ETL Module: Roster and meetings ingestion
from .records import Person, Meeting, MeetingsStream, RecordStore, SortKey
from .data_loader import SpreaderDataLoader, load_spreader_data

__all__ = [
    'Person', 'Meeting', 'MeetingsStream', 'RecordStore', 'SortKey',
    'SpreaderDataLoader', 'load_spreader_data'
]
