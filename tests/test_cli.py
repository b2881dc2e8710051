"""
Tests for the pda_cli command line entry point.
"""

import json
import os
import sys

import networkx as nx
import pytest

REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
SAMPLES = os.path.join(REPO_ROOT, "samples")


def _ensure_scripts_on_path():
    scripts_dir = os.path.join(REPO_ROOT, "scripts")
    if scripts_dir not in sys.path:
        sys.path.insert(0, scripts_dir)


@pytest.fixture
def cli():
    _ensure_scripts_on_path()
    import pda_cli

    return pda_cli


class TestCliRun:
    def test_replays_sample_document(self, cli, tmp_path):
        out = tmp_path / "summary.json"

        code = cli.main([os.path.join(SAMPLES, "aboba.yaml"), "--seed", "3", "--iterations", "50", "--out", str(out)])

        assert code == 0
        summary = json.loads(out.read_text(encoding="utf-8"))
        assert len(summary["automaton"]["nodes"]) == 6
        trace = summary["trace"]
        assert trace["state"] == "FINISHED"
        assert trace["accepted"] is True
        assert trace["error"] is None
        assert [root["label"] for root in trace["tree"]] == ["<A>"]
        assert trace["frames"] > 0
        assert trace["input"]["string"] == "aboba"
        assert len(trace["input"]["actions"]) == 8

    def test_replays_jsonl_trace(self, cli, capsys):
        code = cli.main([os.path.join(SAMPLES, "aboba.jsonl")])

        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert "automaton" not in summary
        assert summary["trace"]["accepted"] is True
        assert [root["label"] for root in summary["trace"]["tree"]] == ["<A>"]
        assert summary["trace"]["input"]["actions"][3] == {"type": "reduce", "to": {"symbol": "<B>", "size": 2}}

    def test_layout_only(self, cli, capsys):
        code = cli.main([os.path.join(SAMPLES, "expr.json"), "--seed", "1", "--iterations", "20", "--layout-only"])

        assert code == 0
        summary = json.loads(capsys.readouterr().out)
        assert "trace" not in summary
        assert len(summary["automaton"]["nodes"]) == 4

    def test_export_graphml(self, cli, tmp_path, capsys):
        path = tmp_path / "automaton.graphml"

        code = cli.main([os.path.join(SAMPLES, "expr.json"), "--iterations", "20", "--export-graphml", str(path)])

        assert code == 0
        assert nx.read_graphml(str(path)).number_of_nodes() == 4

    def test_trace_error_exit_code(self, cli, tmp_path, capsys):
        doc = tmp_path / "bad.json"
        doc.write_text(json.dumps({"string": "a", "actions": [{"type": "shift"}, {"type": "shift"}]}), encoding="utf-8")

        code = cli.main([str(doc)])

        assert code == 1
        summary = json.loads(capsys.readouterr().out)
        assert summary["trace"]["state"] == "HALTED"
        assert "shift past end" in summary["trace"]["error"]

    def test_malformed_document(self, cli, tmp_path, capsys):
        doc = tmp_path / "bad.yaml"
        doc.write_text("automaton:\n  - [7]\n", encoding="utf-8")

        assert cli.main([str(doc)]) == 1
        assert "error:" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "name, text",
        [
            ("broken.json", "{not json"),
            ("broken.yaml", "string: [aboba\n"),
            ("notes.txt", "string: aboba\n"),
            ("broken.jsonl", "{\"string\": \"ab\"}\n{shift\n"),
        ],
    )
    def test_unparsable_document(self, cli, tmp_path, capsys, name, text):
        doc = tmp_path / name
        doc.write_text(text, encoding="utf-8")

        assert cli.main([str(doc)]) == 2
        assert "error:" in capsys.readouterr().err

    def test_missing_file(self, cli, tmp_path, capsys):
        assert cli.main([str(tmp_path / "absent.yaml")]) == 2
        assert "error:" in capsys.readouterr().err


class TestCliUtilities:
    def test_version(self, cli, capsys):
        from pda_core import __version__

        assert cli.main(["--version"]) == 0
        assert capsys.readouterr().out.strip() == __version__

    def test_missing_document(self, cli, capsys):
        assert cli.main([]) == 2
        assert "missing document" in capsys.readouterr().err

    def test_list_samples(self, cli, capsys):
        assert cli.main(["--list-samples"]) == 0
        listed = json.loads(capsys.readouterr().out)
        assert any(path.endswith("aboba.yaml") for path in listed)
