"""
Spreader Detector pipeline driver

Order of operations:
1. Load roster and meetings (ETL)
2. Build the record store and sort it by id
3. Propagate probabilities through the meetings
4. Re-sort by probability and classify, highest risk first
5. Write the report (and any requested companion files)

Nothing is written until every step before it has succeeded, and files
already written by the run are removed if a later one cannot be written.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import pandas as pd

from .analysis.classifier import ReportLine, classify, summarize_bands, write_report
from .config import (
    CLASSIFIER_CONFIG, OUTPUT_FILE, PROPAGATION_CONFIG, ClassifierConfig, PropagationConfig
)
from .engines.engine_interface import PropagationResult
from .engines.merge_sort import sort_store
from .engines.propagation import PropagationEngine, propagate
from .errors import OutputFileError
from .etl.data_loader import SpreaderDataLoader
from .etl.records import Person, RecordStore, SortKey

PathLike = Union[str, Path]

__all__ = [
    'AnalysisResult', 'build_store', 'sort_store', 'propagate', 'classify', 'run_analysis'
]


@dataclass
class AnalysisResult:
    """Everything a run produced"""
    store: RecordStore
    propagation: PropagationResult
    lines: List[ReportLine]
    summary: pd.DataFrame
    anomalies: List[str] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)


def build_store(roster_records: Union[pd.DataFrame, Iterable[Tuple[str, int, float]]]) -> RecordStore:
    """
    Create the record store from parsed roster rows.

    Args:
        roster_records: (name, id, age) rows or a roster DataFrame

    Returns:
        RecordStore in roster order, every probability 0
    """
    if isinstance(roster_records, pd.DataFrame):
        rows = zip(roster_records['name'], roster_records['id'], roster_records['age'])
    else:
        rows = roster_records

    store = RecordStore()
    for name, person_id, age in rows:
        store.append(Person(name=str(name), id=int(person_id), age=float(age)))
    return store


def run_analysis(
    people_path: PathLike,
    meetings_path: PathLike,
    output_path: Optional[PathLike] = OUTPUT_FILE,
    *,
    propagation_config: PropagationConfig = PROPAGATION_CONFIG,
    classifier_config: ClassifierConfig = CLASSIFIER_CONFIG,
    figure_path: Optional[PathLike] = None,
    trace_path: Optional[PathLike] = None,
    summary_path: Optional[PathLike] = None,
    progress: bool = False,
) -> AnalysisResult:
    """
    Run the full pipeline.

    Args:
        people_path: Roster file, one "name id age" per line
        meetings_path: Sick id line followed by "infector infected distance time" lines
        output_path: Report destination, None to skip writing it
        figure_path: Optional risk profile figure
        trace_path: Optional CSV of every processed meeting
        summary_path: Optional CSV of per-band counts
        progress: Show a progress bar over the meetings

    Returns:
        AnalysisResult with the final store, report lines and written paths
    """
    loader = SpreaderDataLoader(people_path, meetings_path, propagation_config)
    roster_df, stream = loader.load()

    store = sort_store(build_store(roster_df), SortKey.ID)
    propagation = PropagationEngine(propagation_config).run(store, stream, progress=progress)
    sort_store(store, SortKey.PROBABILITY)
    lines = classify(store, classifier_config)
    summary = summarize_bands(lines, store, classifier_config)

    result = AnalysisResult(
        store=store,
        propagation=propagation,
        lines=lines,
        summary=summary,
        anomalies=list(loader.anomaly_log)
    )

    try:
        if output_path is not None:
            result.written.append(write_report(lines, output_path, classifier_config))
        if summary_path is not None:
            result.written.append(_write_csv(summary, summary_path))
        if trace_path is not None:
            result.written.append(_write_csv(propagation.to_frame(), trace_path))
        if figure_path is not None:
            from .visualization.risk_plots import plot_risk_profile
            result.written.append(plot_risk_profile(lines, figure_path, classifier_config))
    except OutputFileError:
        # A failed run leaves no output behind
        for path in result.written:
            path.unlink(missing_ok=True)
        result.written.clear()
        raise

    return result


def _write_csv(df: pd.DataFrame, path: PathLike) -> Path:
    path = Path(path)
    try:
        df.to_csv(path, index=False)
    except OSError as e:
        raise OutputFileError(f"Cannot write {path}: {e}") from e
    return path
