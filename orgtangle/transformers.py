"""Per-language body transformers applied after reference expansion."""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Mapping, Tuple

from .models import BlockParams

BodyTransformer = Callable[[str, BlockParams], str]

_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_vars(text: str) -> List[Tuple[str, str, bool]]:
    """Split a ``:var`` value into ``(name, value, is_number)`` triples."""
    assignments: List[Tuple[str, str, bool]] = []
    for item in _split_assignments(text):
        name, sep, value = item.partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
            assignments.append((name, value[1:-1], False))
        else:
            assignments.append((name, value, bool(_NUMBER_RE.match(value))))
    return assignments


def _split_assignments(text: str) -> List[str]:
    parts: List[str] = []
    current: List[str] = []
    quote: str | None = None
    for char in text:
        if char in {'"', "'"}:
            if quote == char:
                quote = None
            elif quote is None:
                quote = char
        if char == "," and quote is None:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    if current:
        parts.append("".join(current).strip())
    return [part for part in parts if part]


def generic_transformer(body: str, params: BlockParams) -> str:
    """Wrap ``body`` in its prologue/epilogue and trim trailing whitespace."""
    pieces = [params.value("prologue"), body.rstrip(), params.value("epilogue")]
    return "\n".join(piece for piece in pieces if piece).rstrip()


def python_transformer(body: str, params: BlockParams) -> str:
    lines = []
    for name, value, is_number in parse_vars(params.value("var")):
        lines.append(f"{name} = {value if is_number else repr(value)}")
    return generic_transformer("\n".join(lines + [body]), params)


def shell_transformer(body: str, params: BlockParams) -> str:
    lines = []
    for name, value, is_number in parse_vars(params.value("var")):
        rendered = value if is_number else "'" + value.replace("'", "'\"'\"'") + "'"
        lines.append(f"{name}={rendered}")
    return generic_transformer("\n".join(lines + [body]), params)


def elisp_transformer(body: str, params: BlockParams) -> str:
    bindings = []
    for name, value, is_number in parse_vars(params.value("var")):
        rendered = value if is_number else '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
        bindings.append(f"({name} {rendered})")
    if bindings:
        body = f"(let ({' '.join(bindings)})\n{body})"
    return generic_transformer(body, params)


_REGISTRY: Dict[str, BodyTransformer] = {
    "python": python_transformer,
    "sh": shell_transformer,
    "bash": shell_transformer,
    "shell": shell_transformer,
    "zsh": shell_transformer,
    "emacs-lisp": elisp_transformer,
    "elisp": elisp_transformer,
}


class TransformerRegistry:
    """Maps languages to body transformers with a generic fallback."""

    def __init__(
        self,
        transformers: Mapping[str, BodyTransformer] | None = None,
        *,
        default: BodyTransformer = generic_transformer,
    ) -> None:
        self._transformers: Dict[str, BodyTransformer] = dict(
            _REGISTRY if transformers is None else transformers
        )
        self.default = default

    def register(self, language: str, transformer: BodyTransformer) -> None:
        self._transformers[language] = transformer

    def lookup(self, language: str) -> BodyTransformer | None:
        return self._transformers.get(language)

    def transform(self, language: str, body: str, params: BlockParams) -> str:
        """Apply the language transformer unless ``:no-expand`` is set."""
        transformer = self._transformers.get(language)
        if transformer is None or params.expansion_suppressed:
            return self.default(body, params)
        return transformer(body, params)


_DEFAULT_REGISTRY = TransformerRegistry()


def register_transformer(language: str, transformer: BodyTransformer) -> None:
    """Register ``transformer`` for ``language`` in the shared registry."""
    _DEFAULT_REGISTRY.register(language, transformer)


def default_registry() -> TransformerRegistry:
    return _DEFAULT_REGISTRY


__all__ = [
    "BodyTransformer",
    "TransformerRegistry",
    "default_registry",
    "elisp_transformer",
    "generic_transformer",
    "parse_vars",
    "python_transformer",
    "register_transformer",
    "shell_transformer",
]
