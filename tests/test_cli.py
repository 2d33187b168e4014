"""
Tests for the command-line interface and logging setup.

Usage:
    pytest tests/test_cli.py -v
"""

import json
import logging

import pytest

from cxengine.orchestrator.cli import build_parser, main
from cxengine.orchestrator.logging_config import JSONFormatter


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """main() reconfigures the root logger; put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def run_cli(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestParser:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_limit_is_int(self):
        args = build_parser().parse_args(["root-causes", "--limit", "5"])
        assert args.limit == 5


class TestClassify:

    def test_text_option(self, capsys):
        code, out, _ = run_cli(capsys, "classify", "--text", "The product was broken and defective, terrible service")
        assert code == 0
        payload = json.loads(out)
        assert payload[0]["sentiment"] == "negative"
        assert payload[0]["keyPhrases"] == ["broken", "defective", "terrible"]

    def test_file_input(self, capsys, tmp_path):
        path = tmp_path / "feedback.txt"
        path.write_text("Excellent friendly staff\n\nThe package arrived on Tuesday\n", encoding="utf-8")
        code, out, _ = run_cli(capsys, "classify", str(path))
        assert code == 0
        assert [r["sentiment"] for r in json.loads(out)] == ["positive", "neutral"]


class TestRootCauses:

    def test_file_input(self, capsys, tmp_path):
        path = tmp_path / "complaints.txt"
        path.write_text("slow delivery\n" * 15, encoding="utf-8")
        code, out, _ = run_cli(capsys, "root-causes", str(path))
        assert code == 0
        causes = json.loads(out)
        assert len(causes) == 1
        assert causes[0]["priority"] == "critical"
        assert causes[0]["category"] == "delivery"

    def test_limit(self, capsys, tmp_path):
        path = tmp_path / "complaints.txt"
        path.write_text("crash\n" * 5 + "invoice\n" * 5, encoding="utf-8")
        code, out, _ = run_cli(capsys, "root-causes", str(path), "--limit", "5")
        assert code == 0
        assert [c["title"] for c in json.loads(out)] == ["Crash"]


class TestNPS:

    def test_scores(self, capsys, tmp_path):
        path = tmp_path / "scores.txt"
        path.write_text("9\n10\n3\n", encoding="utf-8")
        code, out, _ = run_cli(capsys, "nps", str(path))
        assert code == 0
        payload = json.loads(out)
        assert payload["promoters"] == 2
        assert payload["detractors"] == 1
        assert payload["npsScore"] == 33.33

    @pytest.mark.parametrize("line", ["11", "abc", "nan", "inf", "6.5"])
    def test_invalid_score(self, capsys, tmp_path, line):
        path = tmp_path / "scores.txt"
        path.write_text(f"9\n{line}\n", encoding="utf-8")
        code, out, err = run_cli(capsys, "nps", str(path))
        assert code == 1
        assert out == ""
        assert "invalid score" in err


class TestBatch:

    def test_batch_file(self, capsys, tmp_path):
        path = tmp_path / "feedback.json"
        path.write_text(json.dumps([
            {"id": "a", "content": "Slow delivery!", "nps_score": 2},
            {"id": "b", "content": "Excellent friendly staff", "nps_score": 10},
        ]), encoding="utf-8")
        code, out, _ = run_cli(capsys, "batch", str(path))
        assert code == 0
        summary = json.loads(out)
        assert summary["status"] == "completed"
        assert summary["processed"] == 2
        assert summary["root_causes"][0]["feedbackIds"] == ["a"]
        assert summary["nps"]["npsScore"] == 0

    def test_invalid_json(self, capsys, tmp_path):
        path = tmp_path / "feedback.json"
        path.write_text("{not json", encoding="utf-8")
        code, _, err = run_cli(capsys, "batch", str(path))
        assert code == 1
        assert "ERROR" in err


class TestErrors:

    def test_missing_file(self, capsys, tmp_path):
        code, _, err = run_cli(capsys, "classify", str(tmp_path / "missing.txt"))
        assert code == 1
        assert "ERROR" in err


class TestJSONFormatter:

    def test_extra_keys(self):
        record = logging.LogRecord("cxengine.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        record.run_id = "abc"
        payload = json.loads(JSONFormatter().format(record))
        assert payload["msg"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["run_id"] == "abc"
        assert "feedback_id" not in payload
