"""orgtangle - extract noweb-style source blocks from org documents.

Example:
    >>> from orgtangle import Orchestrator, OrgDocument
    >>> result = Orchestrator().tangle(OrgDocument.load("notes.org"))
    >>> result.produced_paths
"""

from .cleaner import clean_file, clean_text
from .collector import BlockCollector
from .config import ConfigError, TangleConfig, load_config
from .document import OrgDocument
from .emitter import FileEmitter
from .errors import (
    AmbiguousTargetError,
    DirectiveError,
    DocumentError,
    EmitError,
    ReferenceCycleError,
    ResolutionError,
    TangleError,
    UnknownReferenceError,
)
from .expander import ReferenceExpander
from .grouper import LanguageGrouper
from .models import BlockParams, ExpandedBlock, OutputFile, SourceBlock, SourceLink, TangleResult
from .orchestrator import Orchestrator
from .transformers import TransformerRegistry, register_transformer

__all__ = [
    "AmbiguousTargetError",
    "BlockCollector",
    "BlockParams",
    "ConfigError",
    "DirectiveError",
    "DocumentError",
    "EmitError",
    "ExpandedBlock",
    "FileEmitter",
    "LanguageGrouper",
    "Orchestrator",
    "OrgDocument",
    "OutputFile",
    "ReferenceCycleError",
    "ReferenceExpander",
    "ResolutionError",
    "SourceBlock",
    "SourceLink",
    "TangleConfig",
    "TangleError",
    "TangleResult",
    "TransformerRegistry",
    "UnknownReferenceError",
    "clean_file",
    "clean_text",
    "load_config",
    "register_transformer",
]

__version__ = "0.1.0"
