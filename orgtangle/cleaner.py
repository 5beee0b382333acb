"""Strips tangle decoration from previously generated files."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Tuple

from .logging import get_logger

LINK_RE = re.compile(r"\[\[file:[^\[\]\n]+\](?:\[[^\[\]\n]*\])?\]")
REFERENCE_MARKER_RE = re.compile(r"<<[^<>\s](?:[^<>\n]*?[^<>\s])?>>")

logger = get_logger("cleaner")


def clean_text(text: str) -> Tuple[str, int]:
    """Drop every line holding a ``[[file:...]]`` link or a noweb reference marker.

    Returns the cleaned text and the number of removed lines. Any other
    line, including its line ending, is kept as-is.
    """
    kept = []
    removed = 0
    for line in text.splitlines(keepends=True):
        if LINK_RE.search(line) or REFERENCE_MARKER_RE.search(line):
            removed += 1
            continue
        kept.append(line)
    return "".join(kept), removed


def clean_file(path: Path | str) -> int:
    """Clean ``path`` in place and return the number of removed lines."""
    target = Path(path)
    cleaned, removed = clean_text(target.read_text(encoding="utf-8"))
    if removed:
        target.write_text(cleaned, encoding="utf-8")
    logger.info("Removed %d marker line(s) from %s", removed, target)
    return removed


__all__ = ["LINK_RE", "REFERENCE_MARKER_RE", "clean_file", "clean_text"]
