"""Noweb reference expansion (``<<name>>``) across a whole document."""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from .errors import ReferenceCycleError, UnknownReferenceError
from .logging import get_logger
from .models import SourceBlock

REFERENCE_RE = re.compile(r"<<([^<>\s](?:[^<>\n]*?[^<>\s])?)>>")


class ReferenceExpander:
    """Resolves noweb references against every block of a document.

    Lookup prefers a block's own name and falls back to blocks sharing a
    ``:noweb-ref``, which are joined in document order. When a reference
    is preceded by other text on its line, that text is repeated in front
    of every line of the inserted expansion.
    """

    def __init__(self, blocks: Iterable[SourceBlock]) -> None:
        self._by_name: Dict[str, SourceBlock] = {}
        self._by_ref: Dict[str, List[SourceBlock]] = defaultdict(list)
        for block in blocks:
            self._by_name.setdefault(block.name, block)
            if block.params.noweb_ref:
                self._by_ref[block.params.noweb_ref].append(block)
        self._cache: Dict[str, str] = {}
        self.logger = get_logger("expander")

    def __contains__(self, name: str) -> bool:
        return name in self._by_name or name in self._by_ref

    def expand(self, block: SourceBlock) -> str:
        """Return the body of ``block`` with references resolved when enabled."""
        if not block.params.noweb_enabled:
            return block.raw_body
        return self._expand_body(block.raw_body, [block.name])

    def _expand_body(self, body: str, stack: Sequence[str]) -> str:
        if "<<" not in body:
            return body
        lines = [self._expand_line(line, stack) for line in body.split("\n")]
        return "\n".join(lines)

    def _expand_line(self, line: str, stack: Sequence[str]) -> str:
        pieces: List[str] = []
        position = 0
        for match in REFERENCE_RE.finditer(line):
            pieces.append(line[position:match.start()])
            # Prefix comes from the expanded output, not the raw line.
            prefix = "".join(pieces).rsplit("\n", 1)[-1]
            expansion = self._resolve(match.group(1), stack)
            pieces.append(expansion.replace("\n", "\n" + prefix))
            position = match.end()
        pieces.append(line[position:])
        return "".join(pieces)

    def _resolve(self, name: str, stack: Sequence[str]) -> str:
        if name in stack:
            raise ReferenceCycleError(stack[0], list(stack) + [name])
        if name in self._cache:
            return self._cache[name]

        targets = self._targets(name)
        if not targets:
            raise UnknownReferenceError(stack[-1], name)

        chain = list(stack) + [name]
        bodies = []
        for target in targets:
            if target.params.noweb_enabled:
                bodies.append(self._expand_body(target.raw_body, chain))
            else:
                bodies.append(target.raw_body)
        expansion = "\n".join(bodies)
        self._cache[name] = expansion
        self.logger.debug("Expanded <<%s>> from %d block(s)", name, len(targets))
        return expansion

    def _targets(self, name: str) -> List[SourceBlock]:
        named = self._by_name.get(name)
        if named is not None:
            return [named]
        return list(self._by_ref.get(name, []))


def find_references(body: str) -> List[str]:
    """Return the reference names in ``body`` in order of appearance."""
    return [match.group(1) for match in REFERENCE_RE.finditer(body)]


__all__ = ["REFERENCE_RE", "ReferenceExpander", "find_references"]
