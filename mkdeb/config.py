"""Loading of package definitions from TOML files."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import platformdirs

_OPTIONAL_FIELDS = (
    "version", "configure", "build", "install",
    "deps", "build_deps", "maintainer", "description",
)


class ConfigError(Exception):
    """The package configuration could not be loaded."""


@dataclass(frozen=True)
class Package:
    """A package definition: where to fetch it and how to build it."""

    name: str
    repo: str
    version: str | None = None
    configure: str | None = None
    build: str | None = None
    install: str | None = None
    deps: str | None = None
    build_deps: str | None = None
    maintainer: str | None = None
    description: str | None = None


def default_config_dir() -> Path:
    """Return the default directory holding package configuration files."""
    return Path(platformdirs.user_config_dir()) / "mkdeb"


def _package_from_table(name: str, table: Any, source: Path) -> Package:
    if not isinstance(table, dict):
        raise ConfigError(f"{source}: package {name!r} must be a table")
    repo = table.get("repo")
    if not isinstance(repo, str):
        raise ConfigError(f"{source}: package {name!r} needs a string 'repo'")
    fields: dict[str, str | None] = {}
    for key in _OPTIONAL_FIELDS:
        value = table.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{source}: package {name!r} field {key!r} must be a string")
        fields[key] = value
    return Package(name=name, repo=repo, **fields)


def load_all_configs(config_dir: Path | str) -> list[Package]:
    """Load every package from the *.toml files in config_dir, sorted by name."""
    directory = Path(config_dir)
    try:
        paths = sorted(p for p in directory.iterdir() if p.suffix == ".toml")
    except OSError as exc:
        raise ConfigError(f"Cannot read config directory {directory}: {exc}") from exc

    packages: dict[str, Package] = {}
    for path in paths:
        try:
            data = tomllib.loads(path.read_text())
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"{path}: {exc}") from exc
        tables = data.get("package")
        if not isinstance(tables, dict):
            raise ConfigError(f"{path}: missing [package] table")
        for name, table in tables.items():
            if name in packages:
                raise ConfigError(f"Duplicate package name: {name}")
            packages[name] = _package_from_table(name, table, path)

    return sorted(packages.values(), key=lambda pkg: pkg.name)