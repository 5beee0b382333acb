"""Tests for orgtangle.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from orgtangle.config import (
    DEFAULT_COMMENT_BEGIN,
    DEFAULT_COMMENT_END,
    ConfigError,
    TangleConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, TangleConfig)
    assert config.root == tmp_path.resolve()
    assert config.document is None
    assert config.comments is False
    assert config.extensions == {}
    assert config.comment_syntax == {}
    assert config.templates.comment_begin == DEFAULT_COMMENT_BEGIN
    assert config.templates.comment_end == DEFAULT_COMMENT_END


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".orgtangle.yml"
    config_file.write_text(
        """
document: docs/notes.org
comments: yes
extensions:
  python: pyw
  fennel: fnl
comment_syntax:
  lua: ["-- ", ""]
  ocaml: "(* "
templates:
  comment_begin: "BEGIN {{ name }}"
  comment_end: "END {{ name }}"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.document == tmp_path.resolve() / "docs" / "notes.org"
    assert config.comments is True
    assert config.extensions == {"python": "pyw", "fennel": "fnl"}
    assert config.comment_syntax == {"lua": ("-- ", ""), "ocaml": ("(* ", "")}
    assert config.templates.comment_begin == "BEGIN {{ name }}"
    assert config.templates.comment_end == "END {{ name }}"


def test_load_config_from_sibling_file_path(tmp_path: Path) -> None:
    (tmp_path / ".orgtangle.yml").write_text("comments: true\n", encoding="utf-8")

    config = load_config(tmp_path / "notes.org")

    assert config.comments is True


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".orgtangle.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_bad_types(tmp_path: Path) -> None:
    config_file = tmp_path / ".orgtangle.yml"
    config_file.write_text("comments: sometimes\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)

    config_file.write_text("extensions: [py]\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_yaml_syntax_errors(tmp_path: Path) -> None:
    (tmp_path / ".orgtangle.yml").write_text("comments: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
