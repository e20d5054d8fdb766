"""
Risk Classification and Report Writing

Bands, checked from the top with the epsilon-tolerant >= comparison:
- probability >= 0.3   -> hospitalization
- probability >= 0.1   -> 14-day quarantine
- otherwise            -> no serious risk
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Union

import pandas as pd

from ..config import CLASSIFIER_CONFIG, ClassifierConfig
from ..engines.comparators import is_at_least
from ..errors import OutputFileError
from ..etl.records import RecordStore, SortKey


class RiskBand(Enum):
    """Medical-action categories, most severe first"""
    HOSPITALIZATION = "hospitalization"
    QUARANTINE = "quarantine"
    NO_RISK = "no_risk"

    def get_template(self, config: ClassifierConfig = CLASSIFIER_CONFIG) -> str:
        if self is RiskBand.HOSPITALIZATION:
            return config.HOSPITALIZATION_MSG
        if self is RiskBand.QUARANTINE:
            return config.QUARANTINE_MSG
        return config.CLEAN_MSG


@dataclass
class ReportLine:
    """One person's entry in the report"""
    name: str
    id: int
    probability: float
    band: RiskBand

    def render(self, config: ClassifierConfig = CLASSIFIER_CONFIG) -> str:
        return self.band.get_template(config).format(name=self.name, id=self.id)


def classify_probability(probability: float,
                         config: ClassifierConfig = CLASSIFIER_CONFIG) -> RiskBand:
    """Map a probability to its risk band"""
    if is_at_least(probability, config.HOSPITALIZATION_THRESHOLD, config.EPSILON):
        return RiskBand.HOSPITALIZATION
    elif is_at_least(probability, config.QUARANTINE_THRESHOLD, config.EPSILON):
        return RiskBand.QUARANTINE
    else:
        return RiskBand.NO_RISK


def classify(store: RecordStore, config: ClassifierConfig = CLASSIFIER_CONFIG) -> List[ReportLine]:
    """
    Classify every person, highest probability first.

    Args:
        store: RecordStore sorted ascending by probability

    Returns:
        One ReportLine per person, in reverse store order
    """
    if store.ordering is not SortKey.PROBABILITY:
        raise ValueError("Classification requires a store sorted by probability")

    lines = []
    for index in range(len(store) - 1, -1, -1):
        person = store[index]
        lines.append(ReportLine(
            name=person.name,
            id=person.id,
            probability=person.probability,
            band=classify_probability(person.probability, config)
        ))
    return lines


def render_report(lines: List[ReportLine], config: ClassifierConfig = CLASSIFIER_CONFIG) -> str:
    return "".join(line.render(config) + "\n" for line in lines)


def write_report(lines: List[ReportLine], path: Union[str, Path],
                 config: ClassifierConfig = CLASSIFIER_CONFIG) -> Path:
    """Write the rendered report, one line per person"""
    path = Path(path)
    text = render_report(lines, config)
    try:
        with open(path, "w") as f:
            f.write(text)
    except OSError as e:
        raise OutputFileError(f"Cannot write report to {path}: {e}") from e
    return path


def summarize_bands(lines: List[ReportLine], store: RecordStore,
                    config: ClassifierConfig = CLASSIFIER_CONFIG) -> pd.DataFrame:
    """
    Per-band head counts.

    Columns: band, count, at_risk_age_count (age >= RISK_AGE),
    max_probability. Every band gets a row, empty ones included.
    """
    ages = {person.id: person.age for person in store}
    records = []
    for band in RiskBand:
        members = [line for line in lines if line.band is band]
        records.append({
            'band': band.value,
            'count': len(members),
            'at_risk_age_count': sum(
                1 for line in members if ages.get(line.id, 0.0) >= config.RISK_AGE
            ),
            'max_probability': max((line.probability for line in members), default=0.0)
        })
    return pd.DataFrame(records, columns=['band', 'count', 'at_risk_age_count', 'max_probability'])
