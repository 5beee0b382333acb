"""Collects source blocks from a document in document order."""

from __future__ import annotations

from typing import Iterator, Optional, Protocol

from .document import DocumentBlock
from .logging import get_logger
from .models import BlockParams, SourceBlock


class BlockSource(Protocol):
    """Anything exposing ordered source blocks (see ``OrgDocument.blocks``)."""

    def blocks(self) -> Iterator[DocumentBlock]:
        ...


class BlockCollector:
    """Restartable projection of a document onto ``SourceBlock`` records.

    Each call to ``iter()`` rescans the document. Unnamed blocks are named
    ``block-<n>`` where ``n`` counts every block seen so far, including
    blocks later dropped by the language filter. Blocks marked
    ``:tangle no`` are yielded; excluding them is up to the caller.
    """

    def __init__(self, document: BlockSource, language: Optional[str] = None) -> None:
        self.document = document
        self.language = language
        self.logger = get_logger("collector")

    def __iter__(self) -> Iterator[SourceBlock]:
        for counter, raw in enumerate(self.document.blocks(), start=1):
            if self.language is not None and raw.language != self.language:
                continue
            name = raw.name or f"block-{counter}"
            self.logger.debug("Collected %s block %s at line %d", raw.language, name, raw.link.line)
            yield SourceBlock(
                language=raw.language,
                name=name,
                params=BlockParams(raw.params),
                raw_body=raw.body,
                link=raw.link,
                index=counter,
            )


def collect_blocks(document: BlockSource, language: Optional[str] = None) -> list[SourceBlock]:
    """Return every collected block as a list."""
    return list(BlockCollector(document, language))


__all__ = ["BlockCollector", "BlockSource", "collect_blocks"]
