"""CLI entrypoints for gitme commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .errors import GitMeError
from .logging import configure_logging
from .models import RequestMetadata
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


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .gitme.yml file or the directory holding it (defaults to the current directory).",
    )


def _add_log_file_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level logs to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitme",
        description="Generate README files for public GitHub repositories with AI.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a README for a GitHub repository URL.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)
    _add_log_file_option(generate_parser)
    generate_parser.add_argument("url", help="GitHub repository URL, e.g. https://github.com/octo/demo")
    generate_parser.add_argument(
        "-o",
        "--output",
        default="README.md",
        help="Where to write the README; use '-' for stdout (defaults to README.md).",
    )
    generate_parser.add_argument("--description", help="Custom project description.")
    generate_parser.add_argument("--features", help="Key features to highlight.")
    generate_parser.add_argument("--license", help="License to mention.")
    generate_parser.add_argument(
        "--context",
        dest="additional_context",
        help="Any additional context for the README.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    _add_log_file_option(serve_parser)
    serve_parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for gitme commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config or Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "generate":
        metadata = RequestMetadata(
            description=args.description,
            features=args.features,
            license=args.license,
            additional_context=args.additional_context,
        )
        orchestrator = Orchestrator(config)
        try:
            readme = orchestrator.generate_from_url(args.url, metadata)
        except GitMeError as exc:
            parser.exit(1, f"gitme generate failed: {exc}\nRun with --verbose for more details.\n")
        if args.output == "-":
            sys.stdout.write(readme if readme.endswith("\n") else readme + "\n")
        else:
            output = Path(args.output)
            output.write_text(readme, encoding="utf-8")
            print(f"README written to {_relativize(output.resolve())}")
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(args.host, args.port, config=config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
