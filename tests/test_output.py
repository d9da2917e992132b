"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- Snippet tables and snippet detail in JSON, plain and Rich mode
- Global instance management
"""

from __future__ import annotations

import json
import re

import pytest

from bytestashy.models import Fragment, Snippet
from bytestashy.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("bytestashy.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("bytestashy.output._is_tty", lambda: True)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("TERM", raising=False)


_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _strip_ansi(text: str) -> str:
    return _ANSI.sub("", text)


def _snippets() -> list[Snippet]:
    return [
        Snippet(
            id=1,
            title="First",
            categories=["python", "cli"],
            fragments=[Fragment(id=1, file_name="a.py", code="print(1)\n")],
            updated_at="2024-05-01",
        ),
        Snippet(id=2, title="Second"),
    ]


class TestOutputFormatResolution:
    def test_auto_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_rich_when_tty(self, tty):
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_plain_when_no_color(self, tty):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True


class TestStreams:
    def test_data_to_stdout_diagnostics_to_stderr(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("data")
        mgr.info("status")
        mgr.error("bad")
        captured = capsys.readouterr()
        assert captured.out == "data\n"
        assert "status" in captured.err
        assert "Error: bad" in captured.err

    def test_quiet_keeps_errors_and_warnings(self, capsys):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.info("info")
        mgr.success("ok")
        mgr.suggest("next")
        mgr.warning("careful")
        mgr.error("bad")
        err = capsys.readouterr().err
        assert "info" not in err
        assert "ok" not in err
        assert "next" not in err
        assert "Warning: careful" in err
        assert "Error: bad" in err

    def test_debug_only_when_verbose(self, capsys):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("hidden")
        OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True).debug("shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "[debug] shown" in err


class TestSnippetRendering:
    def test_plain_table(self, capsys):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_snippets(_snippets())
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "ID\tTitle\tCategories\tFiles\tUpdated"
        assert lines[1] == "1\tFirst\tpython, cli\ta.py\t2024-05-01"
        assert lines[2] == "2\tSecond\t\t\t-"

    def test_json_table_dumps_models(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_snippets(_snippets())
        data = json.loads(capsys.readouterr().out)
        assert [s["id"] for s in data] == [1, 2]
        assert data[0]["fragments"][0]["file_name"] == "a.py"

    def test_plain_detail_includes_code(self, capsys):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_snippet(_snippets()[0])
        out = capsys.readouterr().out
        assert "#1 First" in out
        assert "--- a.py" in out
        assert "print(1)" in out

    def test_json_detail(self, capsys):
        OutputManager(format=OutputFormat.JSON).print_snippet(_snippets()[0])
        assert json.loads(capsys.readouterr().out)["title"] == "First"


class TestRichMarkupInServerText:
    """Server-supplied text containing square brackets is printed literally."""

    def test_table_with_bracketed_title(self, tty, capsys):
        rich = OutputManager(format=OutputFormat.RICH)
        rich.print_snippets(
            [
                Snippet(id=1, title="Fix [/] bracket bug", categories=["[bold]"]),
                Snippet(
                    id=2,
                    title="list[int] helper",
                    fragments=[Fragment(id=1, file_name="[x].py")],
                ),
            ],
            title="Results for [/]",
        )
        out = _strip_ansi(capsys.readouterr().out)
        assert "Fix [/] bracket bug" in out
        assert "list[int] helper" in out
        assert "[bold]" in out
        assert "[x].py" in out

    def test_snippet_detail_with_bracketed_names(self, tty, capsys):
        rich = OutputManager(format=OutputFormat.RICH)
        rich.print_snippet(
            Snippet(
                id=3,
                title="a [/b] c",
                fragments=[Fragment(id=1, file_name="[/cyan].txt", code="x", language="text")],
            )
        )
        out = _strip_ansi(capsys.readouterr().out)
        assert "a [/b] c" in out
        assert "[/cyan].txt" in out

    def test_status_messages_with_brackets(self, tty, capsys):
        mgr = OutputManager(format=OutputFormat.RICH)
        mgr.info('No snippets match "[/]".')
        mgr.success("Saved [/green] ok")
        mgr.suggest("Try [/dim]")
        err = _strip_ansi(capsys.readouterr().err)
        assert 'No snippets match "[/]".' in err
        assert "Saved [/green] ok" in err
        assert "Try [/dim]" in err


class TestGlobalInstance:
    def test_lazy_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_and_reset(self):
        mgr = OutputManager(quiet=True)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr
