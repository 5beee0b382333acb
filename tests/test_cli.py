"""CLI parser and command tests."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from orgtangle.cli import _build_parser, main

_DOC = textwrap.dedent(
    """\
    * Code
    #+begin_src python :tangle yes
    print("hi")
    #+end_src
    #+begin_src sh
    echo loose
    #+end_src
    """
)


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "tangle"]).verbose is True
    assert parser.parse_args(["tangle", "--verbose"]).verbose is True


def test_cli_tangle_file_accepts_optional_target_and_language() -> None:
    args = _build_parser().parse_args(["tangle-file", "notes.org", "out.sh", "sh"])

    assert args.command == "tangle-file"
    assert args.path == "notes.org"
    assert args.target == "out.sh"
    assert args.lang == "sh"
    assert args.comments is None


def test_cli_comments_flag_is_tristate() -> None:
    parser = _build_parser()

    assert parser.parse_args(["tangle", "--comments"]).comments is True
    assert parser.parse_args(["tangle", "--no-comments"]).comments is False


def test_main_tangle_file_prints_produced_paths(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "notes.org").write_text(_DOC, encoding="utf-8")

    main(["tangle-file", "notes.org", "loose.sh"])

    out = capsys.readouterr().out.splitlines()
    assert out == ["notes.py", "loose.sh"]
    assert (tmp_path / "loose.sh").read_text(encoding="utf-8") == "echo loose\n"


def test_main_tangle_uses_configured_document(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "notes.org").write_text(_DOC, encoding="utf-8")
    (tmp_path / ".orgtangle.yml").write_text("document: notes.org\n", encoding="utf-8")

    main(["tangle"])

    assert capsys.readouterr().out.splitlines() == ["notes.py"]


def test_main_tangle_without_document_exits(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["tangle"])

    assert excinfo.value.code == 1


def test_main_reports_missing_document(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["tangle-file", "absent.org"])

    assert excinfo.value.code == 1
    assert "Cannot read document" in capsys.readouterr().err


def test_main_clean_strips_markers(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "notes.py"
    target.write_text("# [[file:notes.org::2][block-1]]\nprint(1)\n# <<block-1>> ends here\n", encoding="utf-8")

    main(["clean", "notes.py"])

    assert target.read_text(encoding="utf-8") == "print(1)\n"
    assert "Removed 2 line(s) from notes.py" in capsys.readouterr().out


def test_main_log_file_records_the_run(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "notes.org").write_text(_DOC, encoding="utf-8")

    main(["--log-file", "logs/run.log", "tangle-file", "notes.org"])

    log = (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")
    assert "Tangled 1 code block from notes.org" in log
    assert "DEBUG orgtangle.collector" in log


def test_main_load_file_runs_the_tangled_module(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "init.org").write_text(
        "#+begin_src python\nprint('loaded', 6 * 7)\n#+end_src\n", encoding="utf-8"
    )

    main(["load-file", "init.org"])

    assert "loaded 42" in capsys.readouterr().out
    assert (tmp_path / "init.py").read_text(encoding="utf-8") == "print('loaded', 6 * 7)\n"


def test_main_load_file_without_python_blocks_exits(tmp_path: Path, capsys, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "init.org").write_text("#+begin_src sh\necho hi\n#+end_src\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["load-file", "init.org"])

    assert excinfo.value.code == 1
    assert "No python blocks were tangled" in capsys.readouterr().err


@pytest.mark.parametrize("command", [["tangle-file", "broken.org"], ["tangle", "--document", "broken.org"]])
def test_resolution_errors_are_reported_once(tmp_path: Path, capsys, monkeypatch, command) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "broken.org").write_text(
        "#+begin_src python :tangle yes :noweb yes\n<<nowhere>>\n#+end_src\n", encoding="utf-8"
    )

    main(command)

    assert capsys.readouterr().err.count("unknown block 'nowhere'") == 1
