"""
End-to-end pipeline and command-line tests.
"""
import pandas as pd
import pytest
from matplotlib.axes import Axes

from run_spreader_analysis import main
from spreader_model.analysis.classifier import RiskBand
from spreader_model.errors import MalformedRecordError, OutputFileError, UnknownParticipantError
from spreader_model.etl.records import SortKey
from spreader_model.pipeline import build_store, run_analysis
from spreader_model.visualization.palette import PALETTE


class TestBuildStore:
    def test_from_rows(self):
        store = build_store([("Alice", 2, 30.0), ("Bob", 1, 70.0)])
        assert store.ids() == [2, 1]
        assert store.ordering is None
        assert all(p.probability == 0.0 for p in store)

    def test_from_frame(self):
        df = pd.DataFrame({'name': ["Alice"], 'id': [7], 'age': [30.0]})
        store = build_store(df)
        assert store[0].name == "Alice"
        assert store[0].id == 7
        assert isinstance(store[0].id, int)

    def test_to_frame(self):
        df = build_store([("Alice", 2, 30.0), ("Bob", 1, 70.0)]).to_frame()
        assert list(df.columns) == ['name', 'id', 'age', 'probability']
        assert list(df['name']) == ["Alice", "Bob"]


class TestRunAnalysis:
    def test_two_person_example(self, write_inputs, tmp_path):
        paths = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 2 1.0 30.0\n")
        out = tmp_path / "report.out"
        result = run_analysis(*paths, out)

        probs = {p.name: p.probability for p in result.store}
        assert probs == {"Alice": 1.0, "Bob": 1.0}
        assert result.store.ordering is SortKey.PROBABILITY
        assert out.read_text() == (
            "Hospitalization Required: Bob 2.\n"
            "Hospitalization Required: Alice 1.\n"
        )
        assert result.written == [out]

    def test_empty_meetings_report_everyone_clean(self, write_inputs, tmp_path):
        paths = write_inputs("Alice 1 30\nBob 2 70\nCarol 3 20\n", "")
        result = run_analysis(*paths, tmp_path / "report.out")
        assert [line.band for line in result.lines] == [RiskBand.NO_RISK] * 3
        assert result.propagation.sick_id is None

    def test_mixed_bands(self, write_inputs, tmp_path):
        roster = "Ann 5 70\nBen 3 40\nCat 9 30\nDan 1 80\n"
        meetings = "5\n5 3 2.0 30.0\n3 9 1.0 6.0\n"
        out = tmp_path / "report.out"
        run_analysis(*write_inputs(roster, meetings), out)
        # Ann 1.0, Ben 0.5, Cat 0.5 * 0.2 = 0.1, Dan 0
        assert out.read_text().splitlines() == [
            "Hospitalization Required: Ann 5.",
            "Hospitalization Required: Ben 3.",
            "14-days-Quarantine Required: Cat 9.",
            "No serious chance for infection: Dan 1.",
        ]

    def test_unknown_participant_writes_nothing(self, write_inputs, tmp_path):
        paths = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 3 1.0 30.0\n")
        out = tmp_path / "report.out"
        with pytest.raises(UnknownParticipantError):
            run_analysis(*paths, out)
        assert not out.exists()

    def test_malformed_input_writes_nothing(self, write_inputs, tmp_path):
        paths = write_inputs("Alice 1\n", "1\n")
        out = tmp_path / "report.out"
        with pytest.raises(MalformedRecordError):
            run_analysis(*paths, out)
        assert not out.exists()

    def test_companion_files(self, write_inputs, tmp_path):
        paths = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 2 2.0 30.0\n")
        result = run_analysis(
            *paths,
            tmp_path / "report.out",
            figure_path=tmp_path / "risk.png",
            trace_path=tmp_path / "trace.csv",
            summary_path=tmp_path / "summary.csv",
        )
        assert len(result.written) == 4
        assert all(path.exists() for path in result.written)
        trace = pd.read_csv(tmp_path / "trace.csv")
        assert trace['new_probability'].tolist() == pytest.approx([0.5])
        summary = pd.read_csv(tmp_path / "summary.csv")
        assert summary['count'].sum() == 2

    def test_failed_companion_write_removes_report(self, write_inputs, tmp_path):
        paths = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 2 2.0 30.0\n")
        out = tmp_path / "report.out"
        with pytest.raises(OutputFileError):
            run_analysis(*paths, out, summary_path=tmp_path / "missing" / "summary.csv")
        assert not out.exists()

    def test_failed_figure_removes_earlier_files(self, write_inputs, tmp_path):
        paths = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 2 2.0 30.0\n")
        with pytest.raises(OutputFileError):
            run_analysis(
                *paths,
                tmp_path / "report.out",
                trace_path=tmp_path / "trace.csv",
                summary_path=tmp_path / "summary.csv",
                figure_path=tmp_path / "missing" / "risk.png",
            )
        assert list(tmp_path.glob("*.out")) == []
        assert list(tmp_path.glob("*.csv")) == []

    def test_figure_shades_quarantine_zone(self, write_inputs, tmp_path, monkeypatch):
        spans = []
        original = Axes.axvspan

        def recording_axvspan(ax, xmin, xmax, **kwargs):
            spans.append((xmin, xmax, kwargs.get("color")))
            return original(ax, xmin, xmax, **kwargs)

        monkeypatch.setattr(Axes, "axvspan", recording_axvspan)
        paths = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 2 2.0 30.0\n")
        run_analysis(*paths, None, figure_path=tmp_path / "risk.png")
        assert spans == [(0.1, 0.3, PALETTE["fill"])]

    def test_figure_with_infinite_probability(self, write_inputs, tmp_path):
        paths = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 2 0 30.0\n")
        with pytest.warns(RuntimeWarning):
            result = run_analysis(*paths, None, figure_path=tmp_path / "risk.png")
        assert (tmp_path / "risk.png").exists()
        assert result.lines[0].band is RiskBand.HOSPITALIZATION
        assert result.anomalies


class TestCommandLine:
    def test_success(self, write_inputs, tmp_path, capsys):
        people, meetings = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 2 1.0 30.0\n")
        out = tmp_path / "SpreaderDetectorAnalysis.out"
        assert main([str(people), str(meetings), "--output", str(out)]) == 0
        assert out.read_text().startswith("Hospitalization Required: Bob 2.")
        assert f"OK Saved: {out}" in capsys.readouterr().out

    def test_quiet(self, write_inputs, tmp_path, capsys):
        people, meetings = write_inputs("Alice 1 30\n", "")
        out = tmp_path / "report.out"
        assert main([str(people), str(meetings), "--output", str(out), "--quiet"]) == 0
        assert capsys.readouterr().out == ""

    def test_clamp_flag(self, write_inputs, tmp_path):
        people, meetings = write_inputs("Alice 1 30\nBob 2 70\n", "1\n1 2 0.5 30.0\n")
        out = tmp_path / "report.out"
        trace = tmp_path / "trace.csv"
        assert main([str(people), str(meetings), "--output", str(out),
                     "--trace", str(trace), "--clamp", "--quiet"]) == 0
        assert pd.read_csv(trace)['transmission'].tolist() == [1.0]

    def test_input_error(self, tmp_path, capsys):
        out = tmp_path / "report.out"
        code = main([str(tmp_path / "a.in"), str(tmp_path / "b.in"), "--output", str(out)])
        assert code == 1
        assert "Error in input files." in capsys.readouterr().err
        assert not out.exists()

    def test_unknown_participant_is_an_input_error(self, write_inputs, tmp_path, capsys):
        people, meetings = write_inputs("Alice 1 30\n", "7\n")
        assert main([str(people), str(meetings), "--output", str(tmp_path / "r.out")]) == 1
        err = capsys.readouterr().err
        assert "Error in input files." in err
        assert "7" in err

    def test_output_error(self, write_inputs, tmp_path, capsys):
        people, meetings = write_inputs("Alice 1 30\n", "")
        out = tmp_path / "missing" / "report.out"
        assert main([str(people), str(meetings), "--output", str(out)]) == 1
        assert "Error in output file." in capsys.readouterr().err

    def test_output_error_in_companion_leaves_no_report(self, write_inputs, tmp_path, capsys):
        people, meetings = write_inputs("Alice 1 30\n", "")
        out = tmp_path / "report.out"
        code = main([str(people), str(meetings), "--output", str(out),
                     "--summary", str(tmp_path / "missing" / "summary.csv")])
        assert code == 1
        assert "Error in output file." in capsys.readouterr().err
        assert not out.exists()

    def test_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["only-one-argument"])
        assert exc_info.value.code == 2
