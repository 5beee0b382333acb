"""Configuration loading for orgtangle (.orgtangle.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import CommentSyntax

CONFIG_FILENAME = ".orgtangle.yml"

DEFAULT_COMMENT_BEGIN = "[[{{ link }}][{{ name }}]]"
DEFAULT_COMMENT_END = "<<{{ name }}>> ends here"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class TemplateConfig:
    """Jinja2 templates used for decorative block comments."""

    comment_begin: str = DEFAULT_COMMENT_BEGIN
    comment_end: str = DEFAULT_COMMENT_END


@dataclass
class TangleConfig:
    """Represents the settings defined in .orgtangle.yml."""

    root: Path
    document: Optional[Path] = None
    comments: bool = False
    extensions: Dict[str, str] = field(default_factory=dict)
    comment_syntax: Dict[str, CommentSyntax] = field(default_factory=dict)
    templates: TemplateConfig = field(default_factory=TemplateConfig)


def load_config(config_path: Path) -> TangleConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return TangleConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    document_str = _as_str(data.get("document"))
    document = root / document_str if document_str else None

    comments = _as_bool(data.get("comments"))
    if comments is None and data.get("comments") is not None:
        raise ConfigError("'comments' must be a boolean")

    extensions = _as_str_mapping(data.get("extensions"), "extensions")

    comment_syntax: Dict[str, CommentSyntax] = {}
    for language, value in _as_dict(data.get("comment_syntax")).items():
        comment_syntax[str(language)] = _as_comment_syntax(value, str(language))

    templates = TemplateConfig()
    template_data = _as_dict(data.get("templates"))
    begin = _as_str(template_data.get("comment_begin"))
    end = _as_str(template_data.get("comment_end"))
    if begin is not None:
        templates.comment_begin = begin
    if end is not None:
        templates.comment_end = end

    return TangleConfig(
        root=root,
        document=document,
        comments=bool(comments),
        extensions=extensions,
        comment_syntax=comment_syntax,
        templates=templates,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_mapping(value: Any, key: str) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    result: Dict[str, str] = {}
    for name, item in value.items():
        text = _as_str(item)
        if text is None:
            raise ConfigError(f"'{key}.{name}' must be a string")
        result[str(name)] = text
    return result


def _as_comment_syntax(value: Any, language: str) -> CommentSyntax:
    if isinstance(value, str):
        return (value, "")
    if isinstance(value, (list, tuple)) and 1 <= len(value) <= 2:
        parts = [str(part) for part in value]
        return (parts[0], parts[1] if len(parts) > 1 else "")
    raise ConfigError(f"'comment_syntax.{language}' must be a string or [prefix, suffix]")


__all__ = ["ConfigError", "TangleConfig", "TemplateConfig", "load_config"]
