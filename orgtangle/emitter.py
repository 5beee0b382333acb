"""Writes grouped blocks into their destination files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from jinja2 import Environment, Template

from .config import DEFAULT_COMMENT_BEGIN, DEFAULT_COMMENT_END
from .errors import EmitError
from .languages import DEFAULT_COMMENT_SYNTAX, comment_syntax_table
from .logging import get_logger
from .models import CommentSyntax, ExpandedBlock, OutputFile, TangleTarget

EXECUTABLE_MODE = 0o755


class FileEmitter:
    """Accumulates blocks into files, flushing to disk after every block.

    The first block to reach a path in a run removes whatever file was
    there before, so repeated runs over the same document produce identical
    output. Files already flushed stay on disk if a later write fails.
    """

    def __init__(
        self,
        *,
        comments: bool = False,
        comment_begin: str = DEFAULT_COMMENT_BEGIN,
        comment_end: str = DEFAULT_COMMENT_END,
        comment_syntax: Mapping[str, CommentSyntax] | None = None,
    ) -> None:
        self.comments = comments
        self._env = Environment(autoescape=False, keep_trailing_newline=False)
        self._begin: Template = self._env.from_string(comment_begin)
        self._end: Template = self._env.from_string(comment_end)
        self._syntax = comment_syntax_table(comment_syntax)
        self._files: Dict[Path, OutputFile] = {}
        self._produced: List[Path] = []
        self.logger = get_logger("emitter")

    @property
    def produced_paths(self) -> List[Path]:
        return list(self._produced)

    @property
    def files(self) -> Dict[Path, OutputFile]:
        return dict(self._files)

    def emit_all(self, targets: Iterable[TangleTarget]) -> List[Path]:
        for target in targets:
            self.emit(target)
        return self.produced_paths

    def emit(self, target: TangleTarget) -> Path:
        """Append one block to its destination file."""
        path = target.path
        block = target.block
        state = self._files.get(path)
        if state is None:
            state = self._open(path, block)

        chunk = self.render(block)
        if state.blocks_written and block.params.padline:
            chunk = "\n" + chunk

        try:
            existing = path.read_text(encoding="utf-8") if path.exists() else ""
            content = existing + chunk
            shebang = block.params.shebang
            if shebang and not state.shebang_written:
                content = f"{shebang}\n{content}"
                state.shebang_written = True
            path.write_text(content, encoding="utf-8")
            if state.shebang_written and not state.executable:
                path.chmod(EXECUTABLE_MODE)
                state.executable = True
        except OSError as exc:
            raise EmitError(path, exc.strerror or str(exc)) from exc

        state.blocks_written += 1
        self.logger.debug("Wrote block %s to %s", block.name, path)
        return path

    def render(self, block: ExpandedBlock) -> str:
        """Return the text written for ``block``, including decoration."""
        lines: List[str] = []
        decorate = self.comments and block.params.comments_enabled
        if decorate:
            lines.append(self._comment(self._begin, block))
        if block.expanded_body:
            lines.append(block.expanded_body)
        if decorate:
            lines.append(self._comment(self._end, block))
        return "\n".join(lines) + "\n"

    def _open(self, path: Path, block: ExpandedBlock) -> OutputFile:
        try:
            if path.exists():
                path.unlink()
                self.logger.debug("Removed stale %s", path)
            if block.params.is_yes("mkdirp") and not path.parent.exists():
                os.makedirs(path.parent, exist_ok=True)
        except OSError as exc:
            raise EmitError(path, exc.strerror or str(exc)) from exc
        state = OutputFile(path=path, language=block.language)
        self._files[path] = state
        self._produced.append(path)
        return state

    def _comment(self, template: Template, block: ExpandedBlock) -> str:
        prefix, suffix = self._syntax.get(block.language, DEFAULT_COMMENT_SYNTAX)
        text = template.render(
            link=block.link.target,
            name=block.name,
            language=block.language,
            line=block.link.line,
            heading=block.link.heading or "",
        )
        return f"{prefix}{text}{suffix}"


__all__ = ["EXECUTABLE_MODE", "FileEmitter"]
