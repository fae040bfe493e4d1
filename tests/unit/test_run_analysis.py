"""Tests for the run_analysis command-line entry point."""

import json

import pytest

from scripts.run_analysis import (
    EXIT_BAD_INPUT,
    EXIT_INSUFFICIENT_DATA,
    EXIT_OK,
    main,
    parse_args,
)


@pytest.fixture()
def acme_file(tmp_path, acme_payload):
    path = tmp_path / "acme.json"
    path.write_text(json.dumps(acme_payload))
    return path


class TestParseArgs:

    def test_defaults(self):
        args = parse_args(["data.json"])
        assert str(args.path) == "data.json"
        assert not args.json
        assert not args.synthesize_ttm
        assert not args.sequential

    def test_flags(self):
        args = parse_args(["data.json", "--json", "--synthesize-ttm", "--sequential"])
        assert args.json and args.synthesize_ttm and args.sequential


class TestMain:

    def test_summary_run(self, acme_file, caplog):
        caplog.set_level("INFO", logger="interpreter")
        assert main([str(acme_file), "--sequential"]) == EXIT_OK
        assert "STATEMENT INTERPRETER — ACME" in caplog.text
        assert "Parallel:          False" in caplog.text

    def test_json_output(self, acme_file, capsys):
        assert main([str(acme_file), "--json", "--synthesize-ttm"]) == EXIT_OK
        report = json.loads(capsys.readouterr().out)
        assert report["symbol"] == "ACME"
        assert "healthScore" in report

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.json")]) == EXIT_BAD_INPUT

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        assert main([str(path)]) == EXIT_BAD_INPUT

    def test_schema_mismatch(self, tmp_path):
        path = tmp_path / "nosymbol.json"
        path.write_text(json.dumps({"incomeStatements": {}}))
        assert main([str(path)]) == EXIT_BAD_INPUT

    def test_insufficient_history(self, tmp_path, acme_payload):
        acme_payload["incomeStatements"]["annual"] = acme_payload["incomeStatements"]["annual"][:1]
        path = tmp_path / "thin.json"
        path.write_text(json.dumps(acme_payload))
        assert main([str(path), "--sequential"]) == EXIT_INSUFFICIENT_DATA
