"""Debian package helpers built on dpkg tools."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

DEFAULT_ARCH = "amd64"
DEFAULT_MAINTAINER = "mkdeb <noreply@example.com>"
DEFAULT_DESCRIPTION = "Auto-packaged by mkdeb"


class DebError(RuntimeError):
    """A dpkg tool could not be run or reported failure."""


@dataclass(frozen=True)
class ControlMetadata:
    """Fields of a DEBIAN/control file."""

    name: str
    version: str
    arch: str
    maintainer: str | None = None
    description: str | None = None
    deps: str | None = None
    build_deps: str | None = None

    def render(self) -> str:
        """Return the control file text."""
        lines = [
            f"Package: {self.name}",
            f"Version: {self.version}",
            f"Architecture: {self.arch}",
            f"Maintainer: {self.maintainer or DEFAULT_MAINTAINER}",
            f"Description: {self.description or DEFAULT_DESCRIPTION}",
        ]
        if self.deps is not None:
            lines.append(f"Depends: {self.deps}")
        if self.build_deps is not None:
            lines.append(f"Build-Depends: {self.build_deps}")
        return "".join(f"{line}\n" for line in lines)


def _run(cmd: list[str], capture: bool = False) -> subprocess.CompletedProcess:
    log.debug("Running: %s", cmd)
    try:
        if capture:
            return subprocess.run(
                cmd, capture_output=True, text=True, errors="replace", check=False
            )
        return subprocess.run(cmd, check=False)
    except OSError as exc:
        raise DebError(f"Failed to run {cmd[0]}: {exc}") from exc


def detect_architecture() -> str:
    """Return the dpkg architecture, or 'amd64' if dpkg reports failure."""
    result = _run(["dpkg", "--print-architecture"], capture=True)
    if result.returncode == 0:
        arch = result.stdout.strip()
        log.info("Detected system architecture: %s", arch)
        return arch
    log.error("Failed to detect architecture, falling back to '%s'", DEFAULT_ARCH)
    return DEFAULT_ARCH


def write_control(meta: ControlMetadata, control_dir: Path | str) -> Path:
    """Write the control file into control_dir and return its path."""
    control = meta.render()
    path = Path(control_dir) / "control"
    try:
        path.write_text(control + "\n")
    except OSError as exc:
        raise DebError(f"Failed to write control file: {exc}") from exc
    log.debug("control file:\n%s", control)
    return path


def build_package(destdir: Path | str, output_path: Path | str) -> None:
    """Build a .deb from destdir with dpkg-deb."""
    result = _run(
        ["dpkg-deb", "--build", "--root-owner-group", str(destdir), str(output_path)]
    )
    if result.returncode != 0:
        log.error("dpkg-deb failed")
        raise DebError("dpkg-deb build failed")


def install_package(deb_path: Path | str) -> None:
    """Install a .deb file with sudo dpkg -i."""
    result = _run(["sudo", "dpkg", "-i", str(deb_path)])
    if result.returncode != 0:
        log.error("dpkg -i failed for %s", deb_path)
        raise DebError("Installation failed")


def get_installed_version(pkg_name: str) -> str | None:
    """Return the installed version of a package, or None."""
    cmd = ["dpkg-query", "-W", "-f=${Version}\n", pkg_name]
    log.debug("Running: %s", cmd)
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, errors="replace", check=False
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()