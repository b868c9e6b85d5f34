"""Tests for qualflow CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from qualflow.cli import app

runner = CliRunner()


def _load(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestCodeCommand:
    def test_writes_codes_json(self, tmp_path: Path, interview_text: str) -> None:
        src = tmp_path / "interview.txt"
        src.write_text(interview_text, encoding="utf-8")
        out = tmp_path / "out"
        result = runner.invoke(app, ["code", "-i", str(src), "-o", str(out)])
        assert result.exit_code == 0
        data = _load(out / "codes.json")
        assert data["summary"]["total_codes"] == len(data["codes"])
        assert len(data["segments"]) == 3

    def test_verbose_flag(self, tmp_path: Path) -> None:
        src = tmp_path / "interview.txt"
        src.write_text("I feel anxious about exams.", encoding="utf-8")
        result = runner.invoke(app, ["-v", "code", "-i", str(src), "-o", str(tmp_path)])
        assert result.exit_code == 0

    def test_invalid_config(self, tmp_path: Path) -> None:
        src = tmp_path / "interview.txt"
        src.write_text("I feel anxious about exams.", encoding="utf-8")
        cfg = tmp_path / "qualflow.yaml"
        cfg.write_text("coding:\n  max_paragraph_chars: lots\n", encoding="utf-8")
        result = runner.invoke(app, ["code", "-i", str(src), "-o", str(tmp_path), "-c", str(cfg)])
        assert result.exit_code == 1
        assert "Invalid config" in result.output


class TestRefineCommand:
    def test_merges_use_from_key(self, tmp_path: Path, write_json_file) -> None:
        codes = write_json_file(
            "codes.json",
            {"codes": [{"name": "stress-coping", "frequency": 2}, {"name": "coping-stress", "frequency": 1}]},
        )
        result = runner.invoke(app, ["refine", "-i", str(codes), "-o", str(tmp_path)])
        assert result.exit_code == 0
        data = _load(tmp_path / "codebook.json")
        assert data["merges"][0]["from"] == ["stress-coping", "coping-stress"]
        assert data["refined"][0]["frequency"] == 3


class TestThemesCommand:
    def test_unknown_mode_fails(self, tmp_path: Path, write_json_file) -> None:
        codes = write_json_file("codes.json", [{"name": "a"}])
        result = runner.invoke(app, ["themes", "-i", str(codes), "-o", str(tmp_path), "--mode", "abductive"])
        assert result.exit_code == 1
        assert "Unknown theme extraction mode" in result.output


class TestSaturationCommand:
    def test_writes_analysis(self, tmp_path: Path, write_json_file) -> None:
        sources = write_json_file("sources.json", {"s1": ["a", "b"], "s2": [{"name": "a"}], "s3": ["a"]})
        result = runner.invoke(app, ["saturation", "-i", str(sources), "-o", str(tmp_path)])
        assert result.exit_code == 0
        data = _load(tmp_path / "saturation.json")
        assert data["new_codes_per_source"] == [2, 0, 0]
        assert data["saturated"] is True


class TestNegativesCommand:
    def test_missing_theme(self, tmp_path: Path, write_json_file) -> None:
        themes = write_json_file("themes.json", [{"name": "Positive Change", "supporting_codes": ["growth"]}])
        codes = write_json_file("codes.json", [])
        result = runner.invoke(
            app,
            ["negatives", "-t", str(themes), "--theme", "Missing", "-i", str(codes), "-o", str(tmp_path)],
        )
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_reports_cases(self, tmp_path: Path, write_json_file) -> None:
        themes = write_json_file("themes.json", [{"name": "Positive Change", "supporting_codes": ["growth"]}])
        codes = write_json_file("codes.json", [{"name": "growth"}, {"name": "negative-spiral"}])
        result = runner.invoke(
            app,
            ["negatives", "-t", str(themes), "--theme", "Positive Change", "-i", str(codes), "-o", str(tmp_path)],
        )
        assert result.exit_code == 0
        data = _load(tmp_path / "negatives.json")
        assert [c["code"] for c in data["negative_cases"]] == ["negative-spiral"]


class TestTheoryCommand:
    def test_no_codes_fails(self, tmp_path: Path, write_json_file) -> None:
        codes = write_json_file("codes.json", [])
        result = runner.invoke(app, ["theory", "-i", str(codes), "-q", "Why?", "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert "No categories" in result.output

    def test_writes_theory_then_report(self, tmp_path: Path, write_json_file) -> None:
        codes = write_json_file(
            "codes.json",
            [{"name": "stress-condition"}, {"name": "coping-strategy"}, {"name": "positive-outcome"}],
        )
        result = runner.invoke(app, ["theory", "-i", str(codes), "-q", "How do students cope?", "-o", str(tmp_path)])
        assert result.exit_code == 0
        assert _load(tmp_path / "theory.json")["core_category"]["name"] == "strategies"

        result = runner.invoke(app, ["report", "-o", str(tmp_path)])
        assert result.exit_code == 0
        assert "# QualFlow Analysis Report" in (tmp_path / "report.md").read_text(encoding="utf-8")
        assert (tmp_path / "report.html").exists()


class TestRunAllCommand:
    def test_writes_every_artifact(self, tmp_path: Path, interview_text: str, detach_log_files) -> None:
        src = tmp_path / "interview.txt"
        src.write_text(interview_text, encoding="utf-8")
        out = tmp_path / "out"
        result = runner.invoke(
            app, ["run-all", "-i", str(src), "-q", "How do students cope with stress?", "-o", str(out)]
        )
        assert result.exit_code == 0
        for name in ("codes.json", "codebook.json", "themes.json", "patterns.json", "theory.json", "report.md", "report.html"):
            assert (out / name).exists(), name
        theory = _load(out / "theory.json")
        assert theory["stage"] == "theory_integration"

    def test_writes_debug_log_file(self, tmp_path: Path, interview_text: str, detach_log_files) -> None:
        src = tmp_path / "interview.txt"
        src.write_text(interview_text, encoding="utf-8")
        out = tmp_path / "out"
        result = runner.invoke(app, ["run-all", "-i", str(src), "-q", "Why?", "-o", str(out)])
        assert result.exit_code == 0
        log = (out / "analysis.log").read_text(encoding="utf-8")
        assert "stage: Coding" in log
        assert "qualflow.pipeline.auto_coder" in log

    def test_log_file_can_be_disabled(self, tmp_path: Path, interview_text: str, detach_log_files) -> None:
        src = tmp_path / "interview.txt"
        src.write_text(interview_text, encoding="utf-8")
        cfg = tmp_path / "qualflow.yaml"
        cfg.write_text('output:\n  log_file: ""\n', encoding="utf-8")
        out = tmp_path / "out"
        result = runner.invoke(app, ["run-all", "-i", str(src), "-q", "Why?", "-o", str(out), "-c", str(cfg)])
        assert result.exit_code == 0
        assert not (out / "analysis.log").exists()

    def test_missing_input(self, tmp_path: Path, detach_log_files) -> None:
        result = runner.invoke(app, ["run-all", "-i", str(tmp_path / "absent.txt"), "-q", "Why?", "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error" in result.output


class TestBadInputFiles:
    def test_patterns_with_malformed_codes(self, tmp_path: Path, write_json_file) -> None:
        codes = write_json_file("codes.json", [{"frequency": "many"}])
        result = runner.invoke(app, ["patterns", "-i", str(codes), "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error" in result.output

    def test_code_with_missing_text(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["code", "-i", str(tmp_path / "absent.txt"), "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "No such file" in result.output

    def test_segment_with_missing_text(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["segment", "-i", str(tmp_path / "absent.txt"), "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_report_without_theory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["report", "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "No such file" in result.output

    def test_report_with_malformed_theory(self, tmp_path: Path, write_json_file) -> None:
        write_json_file("theory.json", {"core_category": {}})
        result = runner.invoke(app, ["report", "-o", str(tmp_path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
