"""Pipeline orchestration for tangle and load flows."""

from __future__ import annotations

import runpy
from pathlib import Path
from typing import Any, Dict, List, Optional

from .collector import BlockCollector
from .config import TangleConfig
from .document import OrgDocument
from .emitter import FileEmitter
from .errors import DocumentError, ResolutionError
from .expander import ReferenceExpander
from .grouper import LanguageGrouper
from .logging import get_logger
from .models import ExpandedBlock, TangleResult
from .transformers import TransformerRegistry, default_registry

LOAD_LANGUAGE = "python"


class Orchestrator:
    """Runs collect -> expand -> transform -> group -> emit over one document."""

    def __init__(
        self,
        config: TangleConfig | None = None,
        *,
        transformers: TransformerRegistry | None = None,
        comments: Optional[bool] = None,
    ) -> None:
        self.config = config or TangleConfig(root=Path.cwd())
        self.transformers = transformers or default_registry()
        self.comments = self.config.comments if comments is None else comments
        self.logger = get_logger("orchestrator")

    def tangle(
        self,
        document: OrgDocument,
        target_file: Path | str | None = None,
        language: Optional[str] = None,
    ) -> TangleResult:
        """Tangle ``document`` and return the block count and produced paths."""
        document.save()
        result = TangleResult()

        # Every block stays resolvable by reference, whatever the language filter.
        expander = ReferenceExpander(BlockCollector(document))

        expanded: List[ExpandedBlock] = []
        for block in BlockCollector(document, language):
            if block.params.tangle.lower() == "no":
                continue
            try:
                body = expander.expand(block)
            except ResolutionError as exc:
                self.logger.warning("%s; block skipped", exc)
                result.errors.append(str(exc))
                continue
            body = self.transformers.transform(block.language, body, block.params)
            expanded.append(ExpandedBlock(source=block, expanded_body=body))

        grouper = LanguageGrouper(
            document.base_name,
            document.directory,
            default_target=target_file,
            extensions=self.config.extensions,
        )
        grouping = grouper.group(expanded)
        result.errors.extend(str(error) for error in grouping.errors)

        emitter = FileEmitter(
            comments=self.comments,
            comment_begin=self.config.templates.comment_begin,
            comment_end=self.config.templates.comment_end,
            comment_syntax=self.config.comment_syntax,
        )
        for bucket in grouping.buckets.values():
            for target in bucket:
                emitter.emit(target)
                result.block_count += 1
                result.add_path(target.path)

        source = document.path.name if document.path is not None else "<memory>"
        plural = "" if result.block_count == 1 else "s"
        self.logger.info("Tangled %d code block%s from %s", result.block_count, plural, source)
        return result

    def tangle_file(
        self,
        path: Path | str,
        target_file: Path | str | None = None,
        language: Optional[str] = None,
    ) -> List[Path]:
        """Tangle the document stored at ``path`` and return the produced paths."""
        document = OrgDocument.load(path)
        return self.tangle(document, target_file, language).produced_paths

    def load_file(
        self,
        path: Path | str,
        generated: Path | str | None = None,
    ) -> Dict[str, Any]:
        """Re-tangle ``path`` when stale, then execute the generated module."""
        document_path = Path(path).expanduser().resolve()
        generated_path = (
            Path(generated).expanduser().resolve()
            if generated is not None
            else document_path.with_suffix(".py")
        )

        if is_stale(document_path, generated_path):
            self.logger.info("Tangling %s into %s", document_path.name, generated_path.name)
            produced = self.tangle_file(document_path, generated_path, LOAD_LANGUAGE)
            # A stale module that nothing rewrote must not be executed.
            if generated_path not in {produced_path.resolve() for produced_path in produced}:
                raise DocumentError(f"No {LOAD_LANGUAGE} blocks were tangled into {generated_path}")
        else:
            self.logger.debug("%s is up to date", generated_path)

        namespace = runpy.run_path(str(generated_path), run_name=generated_path.stem)
        self.logger.info("Loaded %s", generated_path)
        return namespace


def is_stale(document_path: Path, generated_path: Path) -> bool:
    """True when ``generated_path`` is missing or older than the document."""
    if not generated_path.exists():
        return True
    return document_path.stat().st_mtime > generated_path.stat().st_mtime


__all__ = ["Orchestrator", "is_stale"]
