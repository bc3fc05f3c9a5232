import io
import sys

import pytest

import main
from Calculator import config_manager


@pytest.fixture(autouse=True)
def default_config(tmp_path, monkeypatch):
    config_json = tmp_path / "config.json"
    config_json.write_text('{"precision": 32}', encoding="utf-8")
    monkeypatch.setattr(config_manager, "config_json", config_json)


@pytest.fixture
def gui_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(main, "run_gui", lambda: calls.append(True) or 0)
    return calls


def test_expression_from_arguments(capsys):
    assert main.run(["1", "+", "2"]) == 0
    assert capsys.readouterr().out == "3\n"


def test_precision_flag(capsys):
    assert main.run(["-p", "2", "1/3"]) == 0
    assert capsys.readouterr().out == "0.33\n"


def test_error_prints_marker(capsys):
    assert main.run(["1/0"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Error: expression at [2]: apply operator `/`: division by zero" in captured.err
    assert "1/0\n ^" in captured.err


def test_error_marker_covers_the_span(capsys):
    assert main.run(["1 + foo"]) == 1
    assert "1 + foo\n    ^^^" in capsys.readouterr().err


def test_negative_precision(capsys):
    assert main.run(["-p", "-1", "1"]) == 1
    assert "Invalid precision" in capsys.readouterr().err


def test_verbose_prints_trace(capsys):
    assert main.run(["-v", "2*3"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("Tokens ")
    assert out[-1] == "6"


def test_seed_makes_rand_reproducible(capsys):
    main.run(["--seed", "5", "rand()"])
    first = capsys.readouterr().out
    main.run(["--seed", "5", "rand()"])
    assert capsys.readouterr().out == first


def test_piped_stdin(capsys, monkeypatch, gui_calls):
    monkeypatch.setattr(sys, "stdin", io.StringIO("2 ^ 8\n"))
    assert main.run([]) == 0
    assert capsys.readouterr().out == "256\n"
    assert gui_calls == []


def test_blank_pipe_prints_empty_line(capsys, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("\n"))
    assert main.run([]) == 0
    assert capsys.readouterr().out == "\n"


def test_gui_flag(gui_calls):
    assert main.run(["--gui"]) == 0
    assert gui_calls == [True]


def test_no_input_starts_gui(monkeypatch, gui_calls):
    monkeypatch.setattr(main, "stdin_is_piped", lambda: False)
    assert main.run([]) == 0
    assert gui_calls == [True]


def test_shipped_settings_files_exist():
    assert main.check_files_exist() == []
