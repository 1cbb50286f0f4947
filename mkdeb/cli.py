"""Command-line argument parsing."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

PROG = "mkdeb"
VERSION = "0.0.1"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the mkdeb command."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Build and package GitHub-hosted projects into .deb files",
    )
    parser.add_argument("--version", "-V", action="version", version=f"{PROG} {VERSION}")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase verbosity (-v, -vv)",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", help="Enable debug output"
    )
    parser.add_argument(
        "-c", "--config", default=None, help="Path to configuration TOML file"
    )
    parser.add_argument(
        "-i", "--install", action="store_true",
        help="Install the built package unless same version is installed",
    )
    parser.add_argument(
        "-l", "--list", dest="list", action="store_true",
        help="List installed and configured versions",
    )
    parser.add_argument(
        "-a", "--all", dest="all", action="store_true",
        help="Operate on all packages",
    )
    parser.add_argument(
        "-p", dest="packages", default=None,
        help="Comma-separated list of packages to operate on",
    )
    parser.add_argument(
        "--log", action="store_true", help="Enable per-step logging"
    )
    parser.add_argument(
        "--log-dir", dest="log_dir", default=None,
        help="Directory where logs will be written",
    )
    parser.add_argument(
        "--build-root", dest="build_root", default=None,
        help="Use specified path instead of a temporary directory for building",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse arguments; with no arguments at all, list every package."""
    arguments = list(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(arguments)
    if not arguments:
        args.list = True
        args.all = True
    return args