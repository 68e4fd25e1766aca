"""Tests for the pymemspec command line."""

import json

import pytest

from pymemspec import __version__
from pymemspec.cli import EXIT_HARNESS_ERROR, EXIT_OK, EXIT_UNSAT, create_parser, main


class TestParser:
    def test_check_arguments(self):
        args = create_parser().parse_args(["check", "h.py", "-f", "swap_spec", "--post"])
        assert args.command == "check"
        assert args.file == "h.py"
        assert args.function == "swap_spec"
        assert args.post
        assert args.format is None

    def test_function_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["check", "h.py"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert __version__ in capsys.readouterr().out


class TestCheck:
    def test_consistent_harness(self, examples_file, capsys):
        assert main(["check", str(examples_file), "-f", "swap_spec"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "swap_spec" in out
        assert "consistent" in out

    def test_postconditions(self, examples_file):
        assert main(["check", str(examples_file), "-f", "version_spec", "--post"]) == EXIT_OK

    def test_contradiction(self, examples_file, capsys):
        assert main(["check", str(examples_file), "-f", "contradictory_spec"]) == EXIT_UNSAT
        assert "contradictory" in capsys.readouterr().out

    def test_policy_violation(self, examples_file, capsys):
        assert main(["check", str(examples_file), "-f", "unallocated_spec"]) == EXIT_HARNESS_ERROR
        assert "Region policy violation" in capsys.readouterr().err

    def test_missing_function(self, examples_file, capsys):
        assert main(["check", str(examples_file), "-f", "nope"]) == EXIT_HARNESS_ERROR
        assert "Cannot load harness" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "none.py"), "-f", "x"]) == EXIT_HARNESS_ERROR
        assert "File not found" in capsys.readouterr().err

    def test_harness_raising_arbitrary_exception(self, tmp_path, capsys):
        harness = tmp_path / "broken.py"
        harness.write_text(
            "def broken_spec(ctx):\n    raise ValueError('bad layout')\n", encoding="utf-8"
        )
        assert main(["check", str(harness), "-f", "broken_spec"]) == EXIT_HARNESS_ERROR
        err = capsys.readouterr().err
        assert "Harness failed" in err
        assert "bad layout" in err

    def test_json_report_to_file(self, examples_file, tmp_path):
        output = tmp_path / "report.json"
        code = main(
            ["check", str(examples_file), "-f", "argv_spec", "--format", "json", "-o", str(output)]
        )
        assert code == EXIT_OK
        report = json.loads(output.read_text(encoding="utf-8"))
        assert report["harness"] == "argv_spec"
        assert report["check"]["status"] == "sat"
        assert report["facts"][0]["phase"] == "pre"

    def test_config_file(self, examples_file, tmp_path, capsys):
        config = tmp_path / "pymemspec.toml"
        config.write_text('[output]\nformat = "json"\n', encoding="utf-8")
        code = main(["check", str(examples_file), "-f", "pair_spec", "--config", str(config)])
        assert code == EXIT_OK
        assert json.loads(capsys.readouterr().out)["harness"] == "pair_spec"


class TestInit:
    def test_writes_config(self, tmp_path, capsys):
        assert main(["init", str(tmp_path)]) == EXIT_OK
        assert (tmp_path / "pymemspec.toml").exists()
        assert "Created" in capsys.readouterr().out

    def test_refuses_to_overwrite(self, tmp_path):
        (tmp_path / "pymemspec.toml").write_text("", encoding="utf-8")
        assert main(["init", str(tmp_path)]) == 1


def test_no_command_prints_help(capsys):
    assert main([]) == EXIT_OK
    assert "usage" in capsys.readouterr().out
