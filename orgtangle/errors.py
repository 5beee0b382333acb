"""Exception hierarchy shared by the tangle pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class TangleError(RuntimeError):
    """Base class for every error raised while tangling a document."""


class DocumentError(TangleError):
    """Raised when a document cannot be read or parsed."""


class ResolutionError(TangleError):
    """A block could not be resolved; the block is skipped, the run continues."""

    def __init__(self, block: str, message: str) -> None:
        super().__init__(message)
        self.block = block


class UnknownReferenceError(ResolutionError):
    """A noweb reference names a block that does not exist."""

    def __init__(self, block: str, reference: str) -> None:
        super().__init__(block, f"Block '{block}' references unknown block '{reference}'")
        self.reference = reference


class ReferenceCycleError(ResolutionError):
    """Noweb references loop back onto a block that is still being expanded."""

    def __init__(self, block: str, chain: Sequence[str]) -> None:
        rendered = " -> ".join(chain)
        super().__init__(block, f"Reference cycle while expanding '{block}': {rendered}")
        self.chain = list(chain)


class AmbiguousTargetError(ResolutionError):
    """Two blocks of different languages target the same destination file."""

    def __init__(self, block: str, path: Path, claimed: str, language: str) -> None:
        super().__init__(
            block,
            f"Block '{block}' ({language}) targets {path}, already claimed by {claimed} blocks",
        )
        self.path = path
        self.claimed = claimed
        self.language = language


class DirectiveError(TangleError):
    """A directive value is malformed; the block gets no destination."""

    def __init__(self, block: str, directive: str, value: str) -> None:
        super().__init__(f"Block '{block}' has malformed :{directive} value {value!r}")
        self.block = block
        self.directive = directive
        self.value = value


class EmitError(TangleError):
    """Writing a destination file failed; aborts the current run."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to write {path}: {reason}")
        self.path = path


__all__ = [
    "AmbiguousTargetError",
    "DirectiveError",
    "DocumentError",
    "EmitError",
    "ReferenceCycleError",
    "ResolutionError",
    "TangleError",
    "UnknownReferenceError",
]
