"""The mkdeb command: list, build and install packages from GitHub."""

from __future__ import annotations

import argparse
import logging
import sys
import tarfile
import tempfile
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path

import requests
from tabulate import tabulate

from mkdeb.cli import PROG, VERSION, parse_args
from mkdeb.config import ConfigError, Package, default_config_dir, load_all_configs
from mkdeb.deb import (
    ControlMetadata,
    DebError,
    build_package,
    detect_architecture,
    get_installed_version,
    install_package,
    write_control,
)
from mkdeb.github import find_release
from mkdeb.runner import CommandError, download_with_progress, run_command

log = logging.getLogger(__name__)

DEFAULT_LOG_DIR = "./logs"
_EXTRACT_OPTIONS = {"filter": "tar"} if hasattr(tarfile, "tar_filter") else {}


def select_packages(
    packages: Iterable[Package], all_packages: bool, names: str | None
) -> list[Package]:
    """Pick all packages, or those named in a comma-separated list."""
    if all_packages:
        return list(packages)
    if names is not None:
        wanted = set(names.split(","))
        return [pkg for pkg in packages if pkg.name in wanted]
    raise ValueError("Please specify --all or -p <packages>")


def list_packages(selected: Iterable[Package]) -> str:
    """Return a table of installed and available versions of the packages."""
    rows = []
    with requests.Session() as session:
        for pkg in selected:
            installed = get_installed_version(pkg.name) or "none"
            release = find_release(pkg.repo, pkg.version, session)
            version = release.version if release is not None else "(not found)"
            rows.append([pkg.name, installed, version])
    return tabulate(rows, headers=["Package", "Installed", "Config Version"], tablefmt="plain")


def _work_dir(pkg: Package, version: str, build_root: str | None) -> Path:
    if build_root is not None:
        path = Path(build_root) / f"{pkg.name}-{version}"
        path.mkdir(parents=True, exist_ok=True)
        return path
    return Path(tempfile.mkdtemp())


def _extract(archive: Path, work_dir: Path) -> Path:
    with tarfile.open(archive, "r:gz") as tar:
        tar.extractall(work_dir, **_EXTRACT_OPTIONS)
    for entry in sorted(work_dir.iterdir()):
        if entry.is_dir():
            return entry
    raise tarfile.TarError(f"No directory found in {archive}")


def build_and_package(
    pkg: Package, args: argparse.Namespace, architecture: str
) -> Path | None:
    """Fetch, build and package pkg; return the .deb path, or None if already installed."""
    release = find_release(pkg.repo, pkg.version)
    if release is None:
        raise LookupError(f"Could not find release for {pkg.repo}")
    version = release.version

    if args.install and get_installed_version(pkg.name) == version:
        log.info("%s %s already installed.", pkg.name, version)
        return None

    log.info(
        "Building %s version %s tag %s url %s",
        pkg.name, version, release.tag, release.tarball_url,
    )

    work_dir = _work_dir(pkg, version, args.build_root)
    src_tar = work_dir / "src.tar.gz"
    log.debug("Downloading %s", release.tarball_url)
    download_with_progress(release.tarball_url, src_tar)

    extracted_dir = _extract(src_tar, work_dir)
    destdir = extracted_dir.resolve() / "pkg"
    log.debug("destdir is %s", destdir)
    control_dir = destdir / "DEBIAN"
    control_dir.mkdir(parents=True, exist_ok=True)

    write_control(
        ControlMetadata(
            name=pkg.name,
            version=version,
            arch=architecture,
            maintainer=pkg.maintainer,
            description=pkg.description,
            deps=pkg.deps,
            build_deps=pkg.build_deps,
        ),
        control_dir,
    )

    log_dir = Path(args.log_dir or DEFAULT_LOG_DIR)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")

    steps = (("configure", pkg.configure), ("build", pkg.build), ("install", pkg.install))
    for step, command in steps:
        if command is None:
            continue
        step_log = log_dir / f"{pkg.name}-{step}-{timestamp}.log" if args.log else None
        run_command(command, extracted_dir, args.verbose, str(destdir), step_log)

    output_path = Path(f"{pkg.name}-{version}.deb")
    build_package(destdir, output_path)

    if args.install:
        install_package(output_path)
    return output_path


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the mkdeb command; return the exit status."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(levelname)s %(name)s] %(message)s",
    )
    print(f"{PROG} v{VERSION}")

    config_dir = Path(args.config) if args.config else default_config_dir()
    try:
        packages = load_all_configs(config_dir)
    except ConfigError as exc:
        log.error("Failed to load package configs: %s", exc)
        return 1

    try:
        architecture = detect_architecture()
    except DebError as exc:
        log.error("%s", exc)
        return 1

    try:
        selected = select_packages(packages, args.all, args.packages)
    except ValueError as exc:
        log.error("%s", exc)
        return 1

    if args.list:
        print(list_packages(selected))
        return 0

    for pkg in selected:
        try:
            output = build_and_package(pkg, args, architecture)
        except (
            LookupError,
            CommandError,
            DebError,
            requests.RequestException,
            tarfile.TarError,
            OSError,
        ) as exc:
            print(exc, file=sys.stderr)
            return 1
        if output is None:
            return 0
    return 0