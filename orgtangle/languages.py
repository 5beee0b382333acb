"""Language tables consulted when resolving and decorating output files."""

from __future__ import annotations

from typing import Dict, Mapping

from .models import CommentSyntax

_EXTENSION_BY_LANGUAGE: Dict[str, str] = {
    "python": "py",
    "sh": "sh",
    "bash": "sh",
    "shell": "sh",
    "zsh": "zsh",
    "emacs-lisp": "el",
    "elisp": "el",
    "lisp": "lisp",
    "scheme": "scm",
    "clojure": "clj",
    "c": "c",
    "cpp": "cpp",
    "C++": "cpp",
    "java": "java",
    "js": "js",
    "javascript": "js",
    "typescript": "ts",
    "ruby": "rb",
    "perl": "pl",
    "rust": "rs",
    "go": "go",
    "haskell": "hs",
    "ocaml": "ml",
    "lua": "lua",
    "R": "R",
    "julia": "jl",
    "sql": "sql",
    "yaml": "yml",
    "conf": "conf",
    "css": "css",
    "html": "html",
    "latex": "tex",
    "makefile": "mk",
}

_HASH: CommentSyntax = ("# ", "")
_SLASHES: CommentSyntax = ("// ", "")
_BLOCK: CommentSyntax = ("/* ", " */")
_SEMICOLONS: CommentSyntax = (";; ", "")
_DASHES: CommentSyntax = ("-- ", "")

_COMMENT_SYNTAX: Dict[str, CommentSyntax] = {
    "python": _HASH,
    "sh": _HASH,
    "bash": _HASH,
    "shell": _HASH,
    "zsh": _HASH,
    "ruby": _HASH,
    "perl": _HASH,
    "R": _HASH,
    "julia": _HASH,
    "yaml": _HASH,
    "conf": _HASH,
    "makefile": _HASH,
    "emacs-lisp": _SEMICOLONS,
    "elisp": _SEMICOLONS,
    "lisp": _SEMICOLONS,
    "scheme": _SEMICOLONS,
    "clojure": _SEMICOLONS,
    "c": _BLOCK,
    "css": _BLOCK,
    "cpp": _SLASHES,
    "C++": _SLASHES,
    "java": _SLASHES,
    "js": _SLASHES,
    "javascript": _SLASHES,
    "typescript": _SLASHES,
    "rust": _SLASHES,
    "go": _SLASHES,
    "haskell": _DASHES,
    "lua": _DASHES,
    "sql": _DASHES,
    "ocaml": ("(* ", " *)"),
    "html": ("<!-- ", " -->"),
    "latex": ("% ", ""),
}

DEFAULT_COMMENT_SYNTAX: CommentSyntax = _HASH


def extension_table(overrides: Mapping[str, str] | None = None) -> Dict[str, str]:
    """Return the language -> extension table with ``overrides`` merged on top."""
    table = dict(_EXTENSION_BY_LANGUAGE)
    if overrides:
        table.update({language: ext.lstrip(".") for language, ext in overrides.items()})
    return table


def comment_syntax_table(
    overrides: Mapping[str, CommentSyntax] | None = None,
) -> Dict[str, CommentSyntax]:
    """Return the language -> (prefix, suffix) comment table."""
    table = dict(_COMMENT_SYNTAX)
    if overrides:
        table.update(overrides)
    return table


def extension_for(language: str, table: Mapping[str, str] | None = None) -> str:
    """Look up the file extension for ``language``, falling back to the name itself."""
    lookup = table if table is not None else _EXTENSION_BY_LANGUAGE
    return lookup.get(language) or language


__all__ = [
    "DEFAULT_COMMENT_SYNTAX",
    "comment_syntax_table",
    "extension_for",
    "extension_table",
]
