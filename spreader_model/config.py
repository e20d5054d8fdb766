"""
Global Configuration for the Spreader Detector Model
"""
from dataclasses import dataclass

# Written to the working directory unless the caller asks otherwise
OUTPUT_FILE = "SpreaderDetectorAnalysis.out"

# Input file layout
FIELD_SEPARATOR = r"\s+"
ROSTER_COLUMNS = ("name", "id", "age")
MEETING_COLUMNS = ("infector_id", "infected_id", "distance", "time")


@dataclass(frozen=True)
class PropagationConfig:
    """Physical constants of the transmission model"""

    # Minimal distance two people can be in
    MIN_DISTANCE: float = 1.0

    # Length of the video, also the maximal time two people can be seen together
    MAX_TIME: float = 30.0

    # Clip each meeting's transmission into [0, 1]; off keeps the raw ratio
    CLAMP_PROBABILITY: bool = False


@dataclass(frozen=True)
class ClassifierConfig:
    """Risk thresholds and report templates"""

    HOSPITALIZATION_THRESHOLD: float = 0.3
    QUARANTINE_THRESHOLD: float = 0.1

    # Tolerance for float comparison (sorting and thresholds)
    EPSILON: float = 1e-9

    # Minimum age of the population at risk, summary only
    RISK_AGE: float = 65.0

    HOSPITALIZATION_MSG: str = "Hospitalization Required: {name} {id}."
    QUARANTINE_MSG: str = "14-days-Quarantine Required: {name} {id}."
    CLEAN_MSG: str = "No serious chance for infection: {name} {id}."


# Global instances
PROPAGATION_CONFIG = PropagationConfig()
CLASSIFIER_CONFIG = ClassifierConfig()
