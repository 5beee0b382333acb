"""CLI entrypoints for orgtangle commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .cleaner import clean_file
from .config import ConfigError, TangleConfig, load_config
from .document import OrgDocument
from .errors import TangleError
from .logging import configure_logging
from .orchestrator import Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_comments_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--comments",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Decorate blocks marked ':comments yes' (defaults to the config setting).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orgtangle",
        description="Extract source blocks from org documents into source files.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to .orgtangle.yml or the directory holding it (defaults to the document's directory).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug-level log of the run to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    tangle_file_parser = subparsers.add_parser(
        "tangle-file",
        help="Tangle the document at PATH.",
    )
    _add_verbose_option(tangle_file_parser, suppress_default=True)
    _add_comments_option(tangle_file_parser)
    tangle_file_parser.add_argument("path", help="Org document to tangle.")
    tangle_file_parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Destination for blocks without a :tangle directive.",
    )
    tangle_file_parser.add_argument(
        "lang",
        nargs="?",
        default=None,
        help="Only tangle blocks of this language.",
    )

    tangle_parser = subparsers.add_parser(
        "tangle",
        help="Tangle the active document named in .orgtangle.yml.",
    )
    _add_verbose_option(tangle_parser, suppress_default=True)
    _add_comments_option(tangle_parser)
    tangle_parser.add_argument(
        "--document",
        type=Path,
        default=None,
        help="Override the active document.",
    )

    load_parser = subparsers.add_parser(
        "load-file",
        help="Tangle python blocks when the document changed, then run them.",
    )
    _add_verbose_option(load_parser, suppress_default=True)
    load_parser.add_argument("path", help="Org document to load.")
    load_parser.add_argument(
        "--generated",
        default=None,
        help="Generated module path (defaults to the document path with a .py suffix).",
    )

    clean_parser = subparsers.add_parser(
        "clean",
        help="Remove link and reference marker lines from a tangled file.",
    )
    _add_verbose_option(clean_parser, suppress_default=True)
    clean_parser.add_argument("path", help="Previously tangled source file.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for orgtangle commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
        if args.command == "tangle-file":
            orchestrator = _orchestrator(args, Path(args.path))
            produced = orchestrator.tangle_file(args.path, args.target, args.lang)
            _print_paths(produced)
        elif args.command == "tangle":
            config = _config(args, Path.cwd())
            document_path = args.document or config.document
            if document_path is None:
                parser.exit(1, "No active document: pass --document or set 'document' in .orgtangle.yml\n")
            orchestrator = Orchestrator(config, comments=args.comments)
            result = orchestrator.tangle(OrgDocument.load(document_path))
            _print_paths(result.produced_paths)
        elif args.command == "load-file":
            orchestrator = _orchestrator(args, Path(args.path))
            orchestrator.load_file(args.path, args.generated)
        elif args.command == "clean":
            removed = clean_file(args.path)
            print(f"Removed {removed} line(s) from {_relativize(Path(args.path))}")
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")
    except TangleError as exc:
        parser.exit(1, f"orgtangle {args.command} failed: {exc}\nRun with --verbose for more details.\n")
    except OSError as exc:
        parser.exit(1, f"orgtangle {args.command} failed: {exc}\n")


def _config(args: argparse.Namespace, fallback: Path) -> TangleConfig:
    return load_config(args.config if args.config is not None else fallback)


def _orchestrator(args: argparse.Namespace, document: Path) -> Orchestrator:
    config = _config(args, document.expanduser().resolve().parent)
    comments: Optional[bool] = getattr(args, "comments", None)
    return Orchestrator(config, comments=comments)


def _print_paths(paths: list[Path]) -> None:
    for path in paths:
        print(_relativize(path))


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
