"""Tests for the techlist command line."""

import json

import pytest
from click.testing import CliRunner

from techlist import __version__
from techlist.cli import main
from techlist.core.reporting import MULTIPLE_OCCURRENCES_COMMENT


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run each test from an empty directory without TECHLIST_* variables."""
    for name in ("TECHLIST_SIMILARITY_LIMIT", "TECHLIST_OUTPUT",
                 "TECHLIST_STRIP_WHITESPACE", "TECHLIST_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "technologies.txt"
    path.write_text("Python\nJava\njava\nPythn\n", encoding="utf-8")
    return path


def test_writes_sorted_statements(runner, input_file, tmp_path):
    out = tmp_path / "out.sql"
    result = runner.invoke(main, [str(input_file), str(out)])

    assert result.exit_code == 0, result.output
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "insert into technology (name) values ('Java');" + MULTIPLE_OCCURRENCES_COMMENT
    assert lines[1].startswith("insert into technology (name) values ('Pythn');")
    assert lines[2].startswith("insert into technology (name) values ('Python');")
    assert len(lines) == 3
    for line in lines:
        assert line in result.output


def test_reports_similar_pairs(runner, input_file, tmp_path):
    result = runner.invoke(main, [str(input_file), str(tmp_path / "out.sql")])
    assert "similar: 'Pythn' ~ 'Python' (distance 2)" in result.output


def test_default_output_path(runner, input_file, isolated_env):
    result = runner.invoke(main, [str(input_file)])
    assert result.exit_code == 0, result.output
    assert (isolated_env / "build" / "insert-technologies.sql").exists()


def test_runs_are_byte_identical(runner, input_file, tmp_path):
    out = tmp_path / "out.sql"
    runner.invoke(main, [str(input_file), str(out)])
    first = out.read_bytes()
    runner.invoke(main, [str(input_file), str(out)])
    assert out.read_bytes() == first


def test_empty_input_clears_output(runner, tmp_path):
    source = tmp_path / "empty.txt"
    source.write_text("")
    out = tmp_path / "out.sql"
    out.write_text("old statements\n")

    result = runner.invoke(main, [str(source), str(out)])

    assert result.exit_code == 0
    assert out.read_text() == ""
    assert "similar:" not in result.output


def test_limit_option(runner, input_file, tmp_path):
    result = runner.invoke(main, [str(input_file), str(tmp_path / "out.sql"), "--limit", "1"])
    assert result.exit_code == 0
    assert "similar:" not in result.output


def test_non_integer_limit_is_usage_error(runner, input_file):
    result = runner.invoke(main, [str(input_file), "--limit", "two"])
    assert result.exit_code == 2


def test_missing_input(runner, tmp_path):
    result = runner.invoke(main, [str(tmp_path / "missing.txt"), str(tmp_path / "out.sql")])
    assert result.exit_code == 1
    assert "Input file not found" in result.output
    assert not (tmp_path / "out.sql").exists()


def test_unwritable_output(runner, input_file, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    result = runner.invoke(main, [str(input_file), str(blocker / "out.sql")])
    assert result.exit_code == 1
    assert "Cannot write output file" in result.output


def test_quiet_suppresses_echo(runner, input_file, tmp_path):
    out = tmp_path / "out.sql"
    result = runner.invoke(main, [str(input_file), str(out), "--quiet"])
    assert result.exit_code == 0
    assert "insert into" not in result.output
    assert "insert into" in out.read_text()


def test_strip_whitespace_flag(runner, tmp_path):
    source = tmp_path / "technologies.txt"
    source.write_text("Rust\nRust \n", encoding="utf-8")
    out = tmp_path / "out.sql"

    runner.invoke(main, [str(source), str(out), "--limit", "0"])
    assert len(out.read_text().splitlines()) == 2

    runner.invoke(main, [str(source), str(out), "--limit", "0", "--strip-whitespace"])
    assert out.read_text().splitlines() == [
        "insert into technology (name) values ('Rust');" + MULTIPLE_OCCURRENCES_COMMENT
    ]


def test_config_file(runner, input_file, tmp_path):
    config = tmp_path / "techlist.yml"
    out = tmp_path / "configured.sql"
    config.write_text(f"similarity:\n  limit: 0\noutput:\n  path: {out}\n  echo: false\n")

    result = runner.invoke(main, [str(input_file), "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert out.exists()
    assert "similar:" not in result.output
    assert "insert into" not in result.output


def test_config_discovered_in_working_directory(runner, input_file, isolated_env):
    (isolated_env / ".techlist.yml").write_text("output:\n  path: found.sql\n")
    result = runner.invoke(main, [str(input_file)])
    assert result.exit_code == 0, result.output
    assert (isolated_env / "found.sql").exists()


def test_cli_limit_overrides_config(runner, input_file, tmp_path):
    config = tmp_path / "techlist.yml"
    config.write_text("similarity:\n  limit: 0\n")
    result = runner.invoke(
        main, [str(input_file), str(tmp_path / "out.sql"), "-c", str(config), "-l", "2"]
    )
    assert "similar: 'Pythn' ~ 'Python'" in result.output


def test_malformed_config_limit(runner, input_file, tmp_path):
    config = tmp_path / "techlist.yml"
    config.write_text("similarity:\n  limit: lots\n")
    result = runner.invoke(main, [str(input_file), str(tmp_path / "out.sql"), "-c", str(config)])
    assert result.exit_code == 2
    assert "integer" in result.output


def test_environment_override(runner, input_file, tmp_path):
    out = tmp_path / "env.sql"
    result = runner.invoke(
        main, [str(input_file)],
        env={"TECHLIST_OUTPUT": str(out), "TECHLIST_SIMILARITY_LIMIT": "0"},
    )
    assert result.exit_code == 0, result.output
    assert out.exists()
    assert "similar:" not in result.output


def test_summary(runner, input_file, tmp_path):
    result = runner.invoke(main, [str(input_file), str(tmp_path / "out.sql"), "--summary"])
    assert result.exit_code == 0
    assert "Technologies to review" in result.output
    assert "3 technologies, 1 with multiple occurrences, 1 similar pairs" in result.output


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_error_reported_once(runner, tmp_path):
    result = runner.invoke(main, [str(tmp_path / "missing.txt"), str(tmp_path / "out.sql")])
    assert result.exit_code == 1
    assert result.output.count("Input file not found") == 1


def test_empty_output_path_in_config(runner, input_file, tmp_path):
    config = tmp_path / "techlist.yml"
    config.write_text("output:\n  path:\n")
    result = runner.invoke(main, [str(input_file), "-c", str(config)])
    assert result.exit_code == 2
    assert "output.path" in result.output
    assert not isinstance(result.exception, TypeError)


def test_non_mapping_section_in_config(runner, input_file, tmp_path):
    config = tmp_path / "techlist.yml"
    config.write_text("similarity: 3\n")
    result = runner.invoke(main, [str(input_file), str(tmp_path / "out.sql"), "-c", str(config)])
    assert result.exit_code == 2
    assert "mapping" in result.output


def test_log_dir_writes_json_log(runner, input_file, tmp_path):
    logs = tmp_path / "logs"
    result = runner.invoke(main, [str(input_file), str(tmp_path / "out.sql"), "--log-dir", str(logs)])
    assert result.exit_code == 0, result.output

    log_files = list(logs.glob("techlist_*.jsonl"))
    assert len(log_files) == 1
    entries = [json.loads(line) for line in log_files[0].read_text(encoding="utf-8").splitlines()]
    assert any(entry.get("operation") == "cli_main" for entry in entries)
    assert any(entry.get("operation") == "annotate" for entry in entries)


def test_plain_text_log_from_config(runner, input_file, tmp_path):
    logs = tmp_path / "logs"
    config = tmp_path / "techlist.yml"
    config.write_text(f"logging:\n  dir: {logs}\n  json: false\n")
    result = runner.invoke(main, [str(input_file), str(tmp_path / "out.sql"), "-c", str(config)])
    assert result.exit_code == 0, result.output

    log_files = list(logs.glob("techlist_*.log"))
    assert len(log_files) == 1
    assert "Starting operation: cli_main" in log_files[0].read_text(encoding="utf-8")
