"""
Data Loader with Defensive Parsing
Handles: whitespace-separated roster and meetings files, field validation,
line-accurate error reporting and non-fatal anomaly detection
"""
import csv

import numpy as np
import pandas as pd
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..config import (
    FIELD_SEPARATOR, MEETING_COLUMNS, PROPAGATION_CONFIG, ROSTER_COLUMNS, PropagationConfig
)
from ..errors import InputFileError, MalformedRecordError
from .records import Meeting, MeetingsStream

PathLike = Union[str, Path]

ID_MAX = int(np.iinfo(np.int64).max)


class SpreaderDataLoader:
    """
    Load the people roster and the meetings list.

    Key defensive measures:
    1. Every row must have exactly the expected number of fields
    2. Ids must be non-negative integers, ages/distances/times numeric
    3. Names are taken verbatim (no "NA"/"null" coercion)
    4. Suspicious but parseable input is logged, not rejected
    """

    def __init__(self, people_path: PathLike, meetings_path: PathLike,
                 config: PropagationConfig = PROPAGATION_CONFIG):
        self.people_path = Path(people_path)
        self.meetings_path = Path(meetings_path)
        self.config = config
        self.roster_df: Optional[pd.DataFrame] = None
        self.stream: Optional[MeetingsStream] = None
        self.anomaly_log: List[str] = []

    def load(self) -> Tuple[pd.DataFrame, MeetingsStream]:
        """Load both files"""
        return self.load_roster(), self.load_meetings()

    def load_roster(self) -> pd.DataFrame:
        """Load the roster as a DataFrame with columns name, id, age"""
        table = self._read_table(self.people_path, ROSTER_COLUMNS, skiprows=0)
        if table.empty:
            self.roster_df = pd.DataFrame({
                'name': pd.Series(dtype=object),
                'id': pd.Series(dtype='int64'),
                'age': pd.Series(dtype='float64'),
                'line': pd.Series(dtype='int64'),
            })
            return self.roster_df

        df = pd.DataFrame({
            'name': table['name'],
            'id': self._parse_ids(table, 'id', self.people_path),
            'age': self._parse_floats(table, 'age', self.people_path),
            'line': table['line'],
        })
        self.roster_df = df.reset_index(drop=True)
        self._detect_roster_anomalies()
        return self.roster_df

    def load_meetings(self) -> MeetingsStream:
        """Load the meetings file: sick id on the first non-blank line, then one contact per line"""
        first_line = self._read_first_line(self.meetings_path)
        if first_line is None:
            self.stream = MeetingsStream()
            return self.stream

        line_number, text = first_line
        sick_id = self._parse_sick_id(text, line_number)
        table = self._read_table(self.meetings_path, MEETING_COLUMNS, skiprows=line_number)
        meetings = []
        if not table.empty:
            infector_ids = self._parse_ids(table, 'infector_id', self.meetings_path)
            infected_ids = self._parse_ids(table, 'infected_id', self.meetings_path)
            distances = self._parse_floats(table, 'distance', self.meetings_path)
            times = self._parse_floats(table, 'time', self.meetings_path)
            meetings = [
                Meeting(int(a), int(b), float(d), float(t))
                for a, b, d, t in zip(infector_ids, infected_ids, distances, times)
            ]
            self._detect_meeting_anomalies(meetings, table['line'].tolist())

        self.stream = MeetingsStream(sick_id=sick_id, meetings=meetings)
        return self.stream

    def roster_records(self) -> List[Tuple[str, int, float]]:
        """Roster rows as (name, id, age) tuples, in file order"""
        if self.roster_df is None:
            self.load_roster()
        return list(zip(
            self.roster_df['name'].tolist(),
            self.roster_df['id'].tolist(),
            self.roster_df['age'].tolist()
        ))

    # ------------------------------------------------------------------
    # Parsing helpers
    # ------------------------------------------------------------------

    def _read_first_line(self, path: Path) -> Optional[Tuple[int, str]]:
        """(line number, text) of the first non-blank line, None for a whitespace-only file"""
        try:
            with open(path) as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise InputFileError(f"Cannot read {path}: {e}") from e
        for number, line in enumerate(text.splitlines(), start=1):
            if line.strip():
                return number, line
        return None

    def _parse_sick_id(self, line: str, line_number: int = 1) -> int:
        path = str(self.meetings_path)
        tokens = line.split()
        if len(tokens) != 1:
            raise MalformedRecordError(
                f"Expected a single sick person id, got {len(tokens)} fields", path, line_number
            )
        try:
            sick_id = int(tokens[0])
        except ValueError:
            raise MalformedRecordError(
                f"Sick person id is not an integer: {tokens[0]!r}", path, line_number
            ) from None
        if sick_id < 0:
            raise MalformedRecordError(f"Sick person id is negative: {sick_id}", path, line_number)
        if sick_id > ID_MAX:
            raise MalformedRecordError(f"Sick person id is out of range: {sick_id}", path, line_number)
        return sick_id

    def _read_table(self, path: Path, columns: Tuple[str, ...], skiprows: int) -> pd.DataFrame:
        """
        Read a whitespace-separated file into string columns plus a 1-based
        'line' column. Blank lines are dropped; any row with a missing or
        surplus field raises MalformedRecordError.
        """
        if not path.is_file():
            raise InputFileError(f"Cannot read {path}: no such file")
        try:
            raw = pd.read_csv(
                path,
                sep=FIELD_SEPARATOR,
                header=None,
                skiprows=skiprows,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                quoting=csv.QUOTE_NONE,
            )
        except pd.errors.EmptyDataError:
            return pd.DataFrame(columns=list(columns) + ['line'])
        except pd.errors.ParserError as e:
            raise MalformedRecordError(f"Wrong number of fields ({e})", str(path)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise InputFileError(f"Cannot read {path}: {e}") from e

        raw['line'] = raw.index + 1 + skiprows
        fields = raw.drop(columns='line')
        missing = fields.isna() | (fields == '')
        blank = missing.all(axis=1)
        raw = raw[~blank]
        missing = missing[~blank]
        if raw.empty:
            return pd.DataFrame(columns=list(columns) + ['line'])

        if fields.shape[1] != len(columns):
            raise MalformedRecordError(
                f"Expected {len(columns)} fields ({' '.join(columns)}), got {fields.shape[1]}",
                str(path), int(raw['line'].iloc[0])
            )
        if missing.values.any():
            bad_line = int(raw.loc[missing.any(axis=1), 'line'].iloc[0])
            raise MalformedRecordError(
                f"Missing field, expected: {' '.join(columns)}", str(path), bad_line
            )

        raw.columns = list(columns) + ['line']
        return raw.reset_index(drop=True)

    def _parse_ids(self, table: pd.DataFrame, column: str, path: Path) -> pd.Series:
        values = pd.to_numeric(table[column], errors='coerce')
        if values.dtype == object:
            values = values.astype('float64')
        bad = ~np.isfinite(values) | (values < 0) | (values != values.round())
        # Ids are stored as int64; uint64 and float parses can exceed it
        if pd.api.types.is_unsigned_integer_dtype(values):
            bad |= values > ID_MAX
        elif pd.api.types.is_float_dtype(values):
            bad |= values >= 2.0 ** 63
        if bad.any():
            index = bad.idxmax()
            raise MalformedRecordError(
                f"Invalid {column}: {table.at[index, column]!r} "
                f"(expected a non-negative integer up to {ID_MAX})",
                str(path), int(table.at[index, 'line'])
            )
        return values.astype('int64')

    def _parse_floats(self, table: pd.DataFrame, column: str, path: Path) -> pd.Series:
        values = pd.to_numeric(table[column], errors='coerce')
        bad = values.isna()
        if bad.any():
            index = bad.idxmax()
            raise MalformedRecordError(
                f"Invalid {column}: {table.at[index, column]!r} (expected a number)",
                str(path), int(table.at[index, 'line'])
            )
        return values.astype('float64')

    # ------------------------------------------------------------------
    # Anomaly detection
    # ------------------------------------------------------------------

    def _detect_roster_anomalies(self):
        df = self.roster_df
        duplicated = df[df['id'].duplicated(keep=False)]
        for person_id, group in duplicated.groupby('id'):
            lines = ", ".join(str(n) for n in group['line'])
            self.anomaly_log.append(
                f"Duplicate id {person_id} on lines {lines}: lookups resolve to one of them"
            )
        for _, row in df[df['age'] < 0].iterrows():
            self.anomaly_log.append(f"Line {row['line']}: negative age {row['age']} for {row['name']}")

    def _detect_meeting_anomalies(self, meetings: List[Meeting], lines: List[int]):
        for meeting, line in zip(meetings, lines):
            if meeting.distance == 0:
                self.anomaly_log.append(
                    f"Line {line}: zero distance between {meeting.infector_id} and "
                    f"{meeting.infected_id} gives an infinite transmission"
                )
            elif meeting.distance < self.config.MIN_DISTANCE:
                self.anomaly_log.append(
                    f"Line {line}: distance {meeting.distance} is below the minimum "
                    f"{self.config.MIN_DISTANCE}"
                )
            if meeting.time > self.config.MAX_TIME:
                self.anomaly_log.append(
                    f"Line {line}: meeting time {meeting.time} exceeds the video length "
                    f"{self.config.MAX_TIME}"
                )
            if meeting.infector_id == meeting.infected_id:
                self.anomaly_log.append(f"Line {line}: {meeting.infector_id} meets themselves")

    def print_anomaly_report(self):
        """Print all detected anomalies"""
        if not self.anomaly_log:
            print("No anomalies detected!")
        else:
            print(f"=== Anomaly Report ({len(self.anomaly_log)} issues) ===")
            for i, anomaly in enumerate(self.anomaly_log, 1):
                print(f"{i}. {anomaly}")


def load_spreader_data(people_path: PathLike, meetings_path: PathLike,
                       config: PropagationConfig = PROPAGATION_CONFIG) -> SpreaderDataLoader:
    """Convenience function to load both files"""
    loader = SpreaderDataLoader(people_path, meetings_path, config)
    loader.load()
    return loader
