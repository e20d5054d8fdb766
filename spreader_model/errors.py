"""
Exception taxonomy for the spreader detector pipeline.

Every error is fatal to a run: the driver reports it once and writes no
partial output. Numeric degeneracy is the only condition reported as a
warning instead.
"""
from typing import Optional


class SpreaderDetectorError(Exception):
    """Base class for all pipeline failures"""


class InputFileError(SpreaderDetectorError):
    """An input file is missing or unreadable"""


class MalformedRecordError(InputFileError, ValueError):
    """A roster or meeting row is missing a field or holds an invalid value"""

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        self.path = path
        self.line = line
        location = ""
        if path is not None:
            location = f"{path}"
            if line is not None:
                location += f":{line}"
            location += ": "
        super().__init__(f"{location}{message}")


class RecordNotFoundError(SpreaderDetectorError, LookupError):
    """No record with the requested id exists in the searched range"""

    def __init__(self, target: int, message: Optional[str] = None):
        self.target = target
        super().__init__(message or f"No person with id {target}")


class UnknownParticipantError(RecordNotFoundError):
    """A meeting references an id that is not on the roster"""

    def __init__(self, target: int, row: Optional[int] = None):
        self.row = row
        if row is None:
            message = f"Sick person id {target} is not on the roster"
        else:
            message = f"Meeting row {row} references unknown id {target}"
        super().__init__(target, message)


class OutputFileError(SpreaderDetectorError):
    """The report or one of its companion files could not be written"""


class DegenerateMeetingWarning(RuntimeWarning):
    """A meeting produced a non-finite transmission (e.g. zero distance)"""
