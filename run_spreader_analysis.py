"""
Run the Spreader Detector Analysis

Reads a roster and a meetings file, propagates the infection probability
from the sick person and writes the medical instructions, highest risk first.

    spreader-detector People.in Meetings.in
    spreader-detector People.in Meetings.in --figure risk.png --summary bands.csv
"""
import argparse
import sys
from dataclasses import replace

from spreader_model.config import CLASSIFIER_CONFIG, OUTPUT_FILE, PROPAGATION_CONFIG
from spreader_model.errors import (
    InputFileError, OutputFileError, RecordNotFoundError, SpreaderDetectorError
)
from spreader_model.pipeline import run_analysis

IN_FILE_ERROR = "Error in input files."
OUT_FILE_ERROR = "Error in output file."
STANDARD_LIB_ERR_MSG = "Standard library error."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spreader-detector",
        description="Detect infection risk from meetings seen in videos"
    )
    parser.add_argument("people", help="Path to People.in (name id age per line)")
    parser.add_argument("meetings", help="Path to Meetings.in (sick id, then meetings)")
    parser.add_argument("--output", default=OUTPUT_FILE, help="Report file")
    parser.add_argument("--clamp", action="store_true",
                        help="Clip each meeting's transmission into [0, 1]")
    parser.add_argument("--figure", help="Save a risk profile figure")
    parser.add_argument("--summary", help="Save per-band counts as CSV")
    parser.add_argument("--trace", help="Save every processed meeting as CSV")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    parser.add_argument("--quiet", action="store_true", help="Only print errors")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    propagation_config = PROPAGATION_CONFIG
    if args.clamp:
        propagation_config = replace(PROPAGATION_CONFIG, CLAMP_PROBABILITY=True)

    try:
        result = run_analysis(
            args.people,
            args.meetings,
            args.output,
            propagation_config=propagation_config,
            classifier_config=CLASSIFIER_CONFIG,
            figure_path=args.figure,
            trace_path=args.trace,
            summary_path=args.summary,
            progress=args.progress,
        )
    except (InputFileError, RecordNotFoundError) as e:
        print(IN_FILE_ERROR, file=sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except OutputFileError as e:
        print(OUT_FILE_ERROR, file=sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except SpreaderDetectorError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except MemoryError:
        print(STANDARD_LIB_ERR_MSG, file=sys.stderr)
        return 1

    if not args.quiet:
        for anomaly in result.anomalies:
            print(f"[WARN] {anomaly}")
        for path in result.written:
            print(f"OK Saved: {path}")
        print(result.summary.to_string(index=False))

    return 0


if __name__ == "__main__":
    sys.exit(main())
