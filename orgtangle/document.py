"""Org-mode document model exposing source blocks to the tangle engine."""

from __future__ import annotations

import re
import textwrap
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import DocumentError
from .logging import get_logger
from .models import SourceLink

_HEADING_RE = re.compile(r"^(\*+)\s+(.*?)\s*$")
_TAGS_RE = re.compile(r"\s+:[\w@#%:]+:$")
_NAME_RE = re.compile(r"^\s*#\+name:\s*(.*?)\s*$", re.IGNORECASE)
_BEGIN_RE = re.compile(r"^\s*#\+begin_src(?:[ \t]+([^\s:]\S*))?(.*)$", re.IGNORECASE)
_END_RE = re.compile(r"^\s*#\+end_src\b", re.IGNORECASE)
_KEYWORD_RE = re.compile(r"^\s*#\+\w+", re.IGNORECASE)
_PROPERTY_RE = re.compile(r"^\s*#\+property:\s*header-args(?::(\S+))?\s+(.*)$", re.IGNORECASE)
_DRAWER_START_RE = re.compile(r"^\s*:PROPERTIES:\s*$", re.IGNORECASE)
_DRAWER_END_RE = re.compile(r"^\s*:END:\s*$", re.IGNORECASE)
_DRAWER_ARGS_RE = re.compile(r"^\s*:header-args(?::([^:\s]+))?:\s*(.*)$", re.IGNORECASE)
_ARG_SPLIT_RE = re.compile(r"(?:^|\s+):(?=[A-Za-z])")
_ESCAPED_LINE_RE = re.compile(r"^(\s*),(,*(?:\*|#\+))", re.MULTILINE)

# Header args keyed by language; ``None`` applies to every language.
HeaderArgs = Dict[Optional[str], Dict[str, str]]


@dataclass(frozen=True)
class DocumentBlock:
    """A source block as exposed by the document model."""

    language: str
    name: Optional[str]
    params: Dict[str, str]
    body: str
    link: SourceLink


def parse_header_args(text: str) -> Dict[str, str]:
    """Parse ``:key value :other "quoted value"`` into an ordered mapping.

    Repeated ``:var`` arguments are joined with ``", "``; any other repeated
    key keeps its last value.
    """
    params: Dict[str, str] = {}
    for fragment in _ARG_SPLIT_RE.split(text.strip()):
        fragment = fragment.strip()
        if not fragment:
            continue
        key, _, value = fragment.partition(" ")
        key = key.strip().lower()
        value = _unquote(value.strip())
        if key == "var" and params.get("var"):
            params["var"] = f"{params['var']}, {value}"
        else:
            params[key] = value
    return params


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def _split_begin_line(rest: str) -> Tuple[str, str]:
    """Split the text after the language into (switches, header args)."""
    match = re.search(r"(?:^|\s):(?=[A-Za-z])", rest)
    if match is None:
        return rest.strip(), ""
    return rest[: match.start()].strip(), rest[match.start():].strip()


class OrgDocument:
    """An org document held in memory, optionally backed by a file on disk."""

    def __init__(self, text: str, path: Path | None = None) -> None:
        self._text = text
        self.path = path.resolve() if path is not None else None
        self._modified = False
        self.logger = get_logger("document")

    @classmethod
    def load(cls, path: Path | str) -> "OrgDocument":
        doc_path = Path(path).expanduser()
        try:
            text = doc_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DocumentError(f"Cannot read document {doc_path}: {exc}") from exc
        return cls(text, doc_path)

    @classmethod
    def from_text(cls, text: str, path: Path | str | None = None) -> "OrgDocument":
        return cls(text, Path(path) if path is not None else None)

    @property
    def text(self) -> str:
        return self._text

    @property
    def modified(self) -> bool:
        return self._modified

    @property
    def base_name(self) -> str:
        return self.path.stem if self.path is not None else "untitled"

    @property
    def directory(self) -> Path:
        return self.path.parent if self.path is not None else Path.cwd()

    def set_text(self, text: str) -> None:
        """Replace the in-memory contents without touching the file."""
        if text != self._text:
            self._text = text
            self._modified = True

    def save(self) -> None:
        """Write pending in-memory edits back to disk."""
        if not self._modified:
            return
        if self.path is None:
            self.logger.debug("Document has no backing file; nothing to save")
            return
        try:
            self.path.write_text(self._text, encoding="utf-8")
        except OSError as exc:
            raise DocumentError(f"Cannot save document {self.path}: {exc}") from exc
        self._modified = False
        self.logger.debug("Saved %s", self.path)

    def blocks(self) -> Iterator[DocumentBlock]:
        """Yield every source block in document order."""
        lines = self._text.splitlines()
        file_args = self._file_header_args(lines)
        # (level, title, header args) per open heading
        outline: List[Tuple[int, str, HeaderArgs]] = []
        pending_name: Optional[str] = None
        in_drawer = False
        index = 0

        while index < len(lines):
            line = lines[index]
            heading = _HEADING_RE.match(line)
            if heading:
                level = len(heading.group(1))
                title = _TAGS_RE.sub("", heading.group(2)).strip()
                while outline and outline[-1][0] >= level:
                    outline.pop()
                outline.append((level, title, {}))
                pending_name = None
                index += 1
                continue

            if _DRAWER_START_RE.match(line) and outline:
                in_drawer = True
                index += 1
                continue
            if in_drawer:
                if _DRAWER_END_RE.match(line):
                    in_drawer = False
                else:
                    drawer = _DRAWER_ARGS_RE.match(line)
                    if drawer:
                        language = drawer.group(1)
                        outline[-1][2].setdefault(language, {}).update(
                            parse_header_args(drawer.group(2))
                        )
                index += 1
                continue

            name_match = _NAME_RE.match(line)
            if name_match:
                pending_name = name_match.group(1) or None
                index += 1
                continue

            begin = _BEGIN_RE.match(line)
            if begin:
                start_line = index + 1
                end_index = self._find_end(lines, index)
                language = begin.group(1) or ""
                switches, args_text = _split_begin_line(begin.group(2) or "")
                body_lines = lines[index + 1:end_index]
                params = self._merge_params(file_args, outline, language, args_text)
                yield DocumentBlock(
                    language=language,
                    name=pending_name,
                    params=params,
                    body=self._clean_body(body_lines, preserve="-i" in switches.split()),
                    link=SourceLink(
                        path=self.path,
                        line=start_line,
                        heading=outline[-1][1] if outline else None,
                    ),
                )
                pending_name = None
                index = end_index + 1
                continue

            if line.strip() and not _KEYWORD_RE.match(line):
                pending_name = None
            index += 1

    def _find_end(self, lines: List[str], begin_index: int) -> int:
        for position in range(begin_index + 1, len(lines)):
            if _END_RE.match(lines[position]):
                return position
        location = self.path or "<memory>"
        raise DocumentError(f"Unterminated source block at {location}:{begin_index + 1}")

    @staticmethod
    def _file_header_args(lines: List[str]) -> HeaderArgs:
        args: HeaderArgs = {}
        for line in lines:
            match = _PROPERTY_RE.match(line)
            if match:
                args.setdefault(match.group(1), {}).update(parse_header_args(match.group(2)))
        return args

    @staticmethod
    def _merge_params(
        file_args: HeaderArgs,
        outline: List[Tuple[int, str, HeaderArgs]],
        language: str,
        args_text: str,
    ) -> Dict[str, str]:
        merged: Dict[str, str] = {}
        layers: List[HeaderArgs] = [file_args] + [entry[2] for entry in outline]
        for layer in layers:
            merged.update(layer.get(None, {}))
            if language:
                merged.update(layer.get(language, {}))
        merged.update(parse_header_args(args_text))
        return merged

    @staticmethod
    def _clean_body(body_lines: List[str], *, preserve: bool) -> str:
        body = "\n".join(body_lines)
        if not preserve:
            body = textwrap.dedent(body)
        return _ESCAPED_LINE_RE.sub(r"\1\2", body)


__all__ = ["DocumentBlock", "OrgDocument", "parse_header_args"]
