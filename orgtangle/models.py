"""Core data models shared across tangle components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

_FALSE_VALUES = {"no", "nil", "false"}
_NOWEB_TANGLE_VALUES = {"yes", "tangle", "no-export", "strip-export", "strip-tangle"}


@dataclass(frozen=True)
class SourceLink:
    """Location of a block in its originating document."""

    path: Optional[Path]
    line: int
    heading: Optional[str] = None

    @property
    def target(self) -> str:
        """Render an org link target pointing back at the block."""
        location = self.path.name if self.path is not None else ""
        if self.heading:
            return f"file:{location}::*{self.heading}"
        return f"file:{location}::{self.line}"


class BlockParams(Mapping[str, str]):
    """Read-only view over a block's directives."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: Dict[str, str] = dict(values or {})

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"BlockParams({self._values!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BlockParams):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def value(self, key: str) -> str:
        """Return the stripped value of ``key`` or an empty string."""
        return (self._values.get(key) or "").strip()

    def flag(self, key: str) -> bool:
        """True when ``key`` is present and not explicitly negated."""
        if key not in self._values:
            return False
        return self.value(key).lower() not in _FALSE_VALUES

    def is_yes(self, key: str) -> bool:
        return self.value(key).lower() == "yes"

    @property
    def tangle(self) -> str:
        return self.value("tangle")

    @property
    def noweb_enabled(self) -> bool:
        return self.value("noweb").lower() in _NOWEB_TANGLE_VALUES

    @property
    def comments_enabled(self) -> bool:
        return self.is_yes("comments")

    @property
    def shebang(self) -> str:
        return self.value("shebang")

    @property
    def expansion_suppressed(self) -> bool:
        return self.flag("no-expand")

    @property
    def padline(self) -> bool:
        return self.value("padline").lower() not in _FALSE_VALUES

    @property
    def noweb_ref(self) -> str:
        return self.value("noweb-ref")


@dataclass(frozen=True)
class SourceBlock:
    """A named, language-tagged block as collected from the document."""

    language: str
    name: str
    params: BlockParams
    raw_body: str
    link: SourceLink
    index: int = 0


@dataclass(frozen=True)
class ExpandedBlock:
    """A source block with references resolved and its body transformed."""

    source: SourceBlock
    expanded_body: str

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def language(self) -> str:
        return self.source.language

    @property
    def params(self) -> BlockParams:
        return self.source.params

    @property
    def link(self) -> SourceLink:
        return self.source.link


@dataclass(frozen=True)
class TangleTarget:
    """An expanded block placed on its resolved destination path."""

    path: Path
    block: ExpandedBlock


@dataclass
class OutputFile:
    """Per-run bookkeeping for one destination path."""

    path: Path
    language: str
    shebang_written: bool = False
    executable: bool = False
    blocks_written: int = 0


@dataclass
class TangleResult:
    """Summary of one tangle run."""

    block_count: int = 0
    produced_paths: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def add_path(self, path: Path) -> None:
        if path not in self.produced_paths:
            self.produced_paths.append(path)


LanguageBuckets = Dict[str, List[TangleTarget]]
CommentSyntax = Tuple[str, str]


__all__ = [
    "BlockParams",
    "CommentSyntax",
    "ExpandedBlock",
    "LanguageBuckets",
    "OutputFile",
    "SourceBlock",
    "SourceLink",
    "TangleResult",
    "TangleTarget",
]
