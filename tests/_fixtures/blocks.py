"""Factories for hand-built blocks used across tests."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from orgtangle.models import BlockParams, ExpandedBlock, SourceBlock, SourceLink


def make_block(
    name: str,
    body: str = "",
    *,
    language: str = "python",
    params: Optional[Dict[str, str]] = None,
    line: int = 1,
    document: Optional[Path] = None,
) -> SourceBlock:
    """Return a ``SourceBlock`` with sensible defaults."""
    return SourceBlock(
        language=language,
        name=name,
        params=BlockParams(params or {}),
        raw_body=body,
        link=SourceLink(path=document, line=line),
    )


def make_expanded(
    name: str,
    body: str = "",
    *,
    language: str = "python",
    params: Optional[Dict[str, str]] = None,
    line: int = 1,
    document: Optional[Path] = None,
) -> ExpandedBlock:
    """Return an ``ExpandedBlock`` whose expanded body equals ``body``."""
    source = make_block(
        name, body, language=language, params=params, line=line, document=document
    )
    return ExpandedBlock(source=source, expanded_body=body)


__all__ = ["make_block", "make_expanded"]
