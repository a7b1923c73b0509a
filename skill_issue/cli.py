"""Command-line entry point for the skill-issue scanner."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from . import DISTRIBUTION_NAME, __version__
from .config import OUTPUT_FORMATS, Config, ConfigError, ConfigFile, find_config_file, load_config_file
from .engine import Engine
from .logging import configure_logging, get_logger
from .output import format_findings
from .remote import RemoteError, fetch_remote_skill
from .rules import RuleRegistry
from .scanner import FileSnapshot, ScanError, scan_directory
from .severity import Severity

logger = get_logger("cli")

FATAL_EXIT_CODE = 2


def _severity_arg(value: str) -> Severity:
    try:
        return Severity.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=DISTRIBUTION_NAME,
        description="Static security analyzer for Claude skill directories.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the skill directory to analyze (defaults to the current directory).",
    )
    parser.add_argument(
        "--format",
        "-f",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (defaults to table).",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to a configuration file (defaults to <path>/.skill-issue.yaml).",
    )
    parser.add_argument(
        "--severity",
        "-s",
        type=_severity_arg,
        default=None,
        help="Minimum severity to report: info, warning or error (defaults to info).",
    )
    parser.add_argument(
        "--ignore",
        nargs="+",
        action="extend",
        default=[],
        metavar="RULE_ID",
        help="Rule IDs to ignore (repeatable).",
    )
    parser.add_argument(
        "--error-on",
        type=_severity_arg,
        default=None,
        help="Minimum severity that causes exit code 2 (defaults to error).",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress all output except findings.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show progress and rule-loading details on stderr.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored table output (also honoured via the NO_COLOR environment variable).",
    )
    parser.add_argument(
        "--remote",
        default=None,
        help="Remote GitHub skill specifier (owner/repo, owner/repo:branch@skill or a GitHub URL).",
    )
    parser.add_argument(
        "--github-token",
        default=None,
        help="GitHub API token for authenticated requests (defaults to $GITHUB_TOKEN).",
    )
    parser.add_argument("--version", action="version", version=f"{DISTRIBUTION_NAME} {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Build the scan policy; config files are only read for local scans."""

    config_file: Optional[ConfigFile] = None
    if not args.remote:
        try:
            path = find_config_file(Path(args.path), args.config)
            if path is not None:
                logger.debug("loading config from %s", path)
                config_file = load_config_file(path)
        except ConfigError as exc:
            logger.warning("%s; using defaults", exc)
    return Config.from_sources(
        config_file,
        severity=args.severity,
        error_on=args.error_on,
        output_format=args.format,
        ignore=args.ignore,
    )


def stdout_is_terminal() -> bool:
    return sys.stdout.isatty()


def use_color(args: argparse.Namespace) -> bool:
    if args.no_color or "NO_COLOR" in os.environ:
        return False
    return stdout_is_terminal()


def collect_files(args: argparse.Namespace) -> Tuple[List[FileSnapshot], str]:
    if args.remote:
        token = args.github_token or os.environ.get("GITHUB_TOKEN")
        logger.info("scanning remote: %s", args.remote)
        return fetch_remote_skill(args.remote, token), args.remote
    logger.info("scanning: %s", args.path)
    return scan_directory(Path(args.path)), args.path


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    config = load_config(args)
    try:
        files, display_path = collect_files(args)
    except (ScanError, RemoteError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return FATAL_EXIT_CODE
    logger.info("found %d file(s) to analyze", len(files))

    registry = RuleRegistry.with_defaults()
    logger.info("loaded %d rule(s)", len(registry))

    findings = Engine(config, registry).run(files)
    if not args.quiet or findings:
        print(format_findings(config.format, findings, display_path, registry, color=use_color(args)))
    logger.info("scan complete: %d file(s), %d finding(s)", len(files), len(findings))

    return Engine.exit_code(findings, config.error_on)


def entrypoint() -> None:  # pragma: no cover
    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover
    entrypoint()
