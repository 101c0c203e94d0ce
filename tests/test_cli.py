import json

import pytest

import todo


@pytest.fixture
def run(todos_file, capsys):
    """Run the CLI against the per-test file; returns (exit code, stdout, stderr)."""
    def _run(*args):
        code = todo.main(["--file", str(todos_file), *args])
        out, err = capsys.readouterr()
        return code, out, err
    return _run


def test_add_and_list(run):
    code, out, _ = run("add", "buy milk")
    assert code == 0
    assert out == "✓ Todo added: buy milk\n"

    run("add", "walk dog")
    run("done", "1")
    code, out, _ = run("list")
    assert code == 0
    assert "--- Your Todos ---" in out
    assert "1. [x] buy milk" in out
    assert "2. [ ] walk dog" in out


def test_list_empty(run):
    code, out, _ = run("list")
    assert code == 0
    assert out == "No todos yet!\n"


def test_done_unknown_id_fails(run):
    code, out, err = run("done", "7")
    assert code == 1
    assert out == ""
    assert err == "Todo 7 not found\n"


def test_done_non_numeric_id_is_rejected(run):
    code, _, err = run("done", "seven")
    assert code == 2
    assert err == "Invalid id: seven\n"


@pytest.mark.parametrize("command", ["done", "delete"])
@pytest.mark.parametrize("raw", ["²", "①"])
def test_unicode_digit_id_is_rejected(run, command, raw):
    run("add", "buy milk")
    code, _, err = run(command, raw)
    assert code == 2
    assert err == f"Invalid id: {raw}\n"


def test_delete_prints_removed_text(run, todos_file):
    run("add", "buy milk")
    run("add", "walk dog")
    code, out, _ = run("delete", "1")
    assert code == 0
    assert out == "✓ Todo 1 deleted: buy milk\n"
    assert [t["id"] for t in json.loads(todos_file.read_text())] == [2]


def test_delete_unknown_id_fails(run):
    code, _, err = run("delete", "3")
    assert code == 1
    assert "not found" in err


def test_add_blank_text_is_rejected(run, todos_file):
    code, _, err = run("add", "   ")
    assert code == 2
    assert err == "Todo text cannot be empty\n"
    assert not todos_file.exists()


def test_missing_argument_prints_usage(run):
    with pytest.raises(SystemExit) as exc:
        run("add")
    assert exc.value.code == 2


def test_unknown_command_lists_commands(todos_file, capsys):
    with pytest.raises(SystemExit) as exc:
        todo.main(["--file", str(todos_file), "frobnicate"])
    assert exc.value.code == 2
    err = capsys.readouterr().err
    for name in ["add", "list", "done", "delete", "clear"]:
        assert name in err


# ---------------------------------------------------------------------------
# Clear
# ---------------------------------------------------------------------------

def test_clear_confirmed(run, todos_file, monkeypatch):
    run("add", "a")
    run("add", "b")
    monkeypatch.setattr("builtins.input", lambda prompt: "y")
    code, out, _ = run("clear")
    assert code == 0
    assert out == "✓ Cleared 2 todos\n"
    assert json.loads(todos_file.read_text()) == []


@pytest.mark.parametrize("answer", ["", "n", "no", "maybe"])
def test_clear_declined(run, todos_file, monkeypatch, answer):
    run("add", "a")
    before = todos_file.read_text()
    monkeypatch.setattr("builtins.input", lambda prompt: answer)
    code, out, _ = run("clear")
    assert code == 0
    assert out == "Cancelled.\n"
    assert todos_file.read_text() == before


def test_clear_without_a_terminal_is_declined(run, todos_file, monkeypatch):
    run("add", "a")

    def no_input(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", no_input)
    _, out, _ = run("clear")
    assert out == "Cancelled.\n"
    assert len(json.loads(todos_file.read_text())) == 1


def test_clear_yes_flag_skips_prompt(run, todos_file, monkeypatch):
    run("add", "a")

    def fail(prompt):
        raise AssertionError("should not prompt")

    monkeypatch.setattr("builtins.input", fail)
    _, out, _ = run("clear", "--yes")
    assert out == "✓ Cleared 1 todos\n"


def test_clear_empty_store(run):
    code, out, _ = run("clear")
    assert code == 0
    assert out == "No todos to clear.\n"


def test_write_failure_exits_nonzero(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    code = todo.main(["--file", str(blocker / "todos.json"), "add", "lost"])
    assert code == 1
    assert "Error writing todos" in capsys.readouterr().err
