"""Resolves destinations and buckets expanded blocks by language."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from .errors import AmbiguousTargetError, DirectiveError, TangleError
from .languages import extension_for, extension_table
from .logging import get_logger
from .models import ExpandedBlock, LanguageBuckets, TangleTarget


@dataclass
class GroupingResult:
    """Buckets in first-seen language order plus per-block errors."""

    buckets: LanguageBuckets = field(default_factory=dict)
    errors: List[TangleError] = field(default_factory=list)

    @property
    def block_count(self) -> int:
        return sum(len(bucket) for bucket in self.buckets.values())

    def paths(self) -> List[Path]:
        ordered: List[Path] = []
        for bucket in self.buckets.values():
            for target in bucket:
                if target.path not in ordered:
                    ordered.append(target.path)
        return ordered


class LanguageGrouper:
    """Maps each block's ``:tangle`` directive onto a destination path.

    ``yes`` derives ``<base name>.<extension>`` next to the document, ``no``
    excludes the block, any other value is an explicit path relative to the
    document directory, and an absent value falls back to ``default_target``.
    """

    def __init__(
        self,
        base_name: str,
        directory: Path,
        *,
        default_target: Path | str | None = None,
        extensions: Mapping[str, str] | None = None,
    ) -> None:
        self.base_name = base_name
        self.directory = Path(directory)
        self.default_target = default_target
        self.extensions = extension_table(extensions)
        self.logger = get_logger("grouper")

    def resolve(self, block: ExpandedBlock) -> Optional[Path]:
        """Return the destination for ``block`` or ``None`` when excluded."""
        tangle = block.params.tangle
        lowered = tangle.lower()
        if lowered == "no":
            return None
        if lowered == "yes":
            if not block.language:
                raise DirectiveError(block.name, "tangle", tangle)
            extension = extension_for(block.language, self.extensions)
            return self._anchor(f"{self.base_name}.{extension}")
        if tangle:
            if "\0" in tangle or "\n" in tangle or tangle.endswith(("/", "\\")):
                raise DirectiveError(block.name, "tangle", tangle)
            return self._anchor(tangle)
        if self.default_target:
            return self._anchor(str(self.default_target))
        return None

    def group(self, blocks: Iterable[ExpandedBlock]) -> GroupingResult:
        result = GroupingResult()
        claimed: Dict[Path, str] = {}
        for block in blocks:
            try:
                path = self.resolve(block)
            except DirectiveError as exc:
                self.logger.warning("%s; block skipped", exc)
                result.errors.append(exc)
                continue
            if path is None:
                self.logger.debug("Block %s has no destination; skipped", block.name)
                continue

            owner = claimed.setdefault(path, block.language)
            if owner != block.language:
                error = AmbiguousTargetError(block.name, path, owner, block.language)
                self.logger.warning("%s; block skipped", error)
                result.errors.append(error)
                continue

            result.buckets.setdefault(block.language, []).append(TangleTarget(path=path, block=block))
        return result

    def _anchor(self, value: str) -> Path:
        """Absolute, normalised form of ``value``; one spelling per file on disk."""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.directory / path
        return Path(os.path.abspath(path))


__all__ = ["GroupingResult", "LanguageGrouper"]
