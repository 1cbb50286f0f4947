"""Look up releases and tags of GitHub repositories."""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from typing import Any

import requests

log = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
USER_AGENT = "mkdeb/0.1"
TIMEOUT = 30


@dataclass(frozen=True)
class GithubRelease:
    """A release or tag resolved to a tarball and a package version."""

    tag: str
    tarball_url: str
    version: str


def extract_deb_version(tag: str, published_at: str | None = None) -> str:
    """Derive a Debian version from a tag name or publication date."""
    if tag.startswith("v") and len(tag) > 1 and tag[1] in string.digits:
        return tag.lstrip("v")
    if tag[:1] and tag[0] in string.digits:
        return tag
    if published_at is not None:
        return published_at.translate(str.maketrans("", "", "-:TZ"))
    return "0.0.0"


def _fetch_json(session: requests.Session, url: str) -> Any:
    log.debug("Fetching %s...", url)
    try:
        response = session.get(url, headers={"User-Agent": USER_AGENT}, timeout=TIMEOUT)
        return response.json()
    except (requests.RequestException, ValueError):
        return None


def _string_field(obj: Any, key: str) -> str | None:
    if not isinstance(obj, dict):
        return None
    value = obj.get(key)
    return value if isinstance(value, str) else None


def _find(session: requests.Session, repo: str, version: str | None) -> GithubRelease | None:
    releases = _fetch_json(session, f"{API_ROOT}/repos/{repo}/releases")
    if not isinstance(releases, list):
        return None
    for release in releases:
        tag = _string_field(release, "tag_name")
        if tag is None:
            return None
        published_at = _string_field(release, "published_at")
        rel_ver = extract_deb_version(tag, published_at)
        log.debug("considering tag: %s rel_ver: %s published: %s", tag, rel_ver, published_at)
        if version is None or version == rel_ver:
            tarball_url = _string_field(release, "tarball_url")
            if tarball_url is None:
                return None
            return GithubRelease(tag=tag, tarball_url=tarball_url, version=rel_ver)

    log.debug("no releases found, trying with tags")
    tags = _fetch_json(session, f"{API_ROOT}/repos/{repo}/tags")
    if not isinstance(tags, list):
        return None
    for tag_obj in tags:
        tag_name = _string_field(tag_obj, "name")
        if tag_name is None:
            return None
        rel_ver = extract_deb_version(tag_name, None)
        if version is None or version == rel_ver:
            return GithubRelease(
                tag=tag_name,
                tarball_url=f"{API_ROOT}/repos/{repo}/tarball/{tag_name}",
                version=rel_ver,
            )
    return None


def find_release(
    repo: str, version: str | None = None, session: requests.Session | None = None
) -> GithubRelease | None:
    """Find the release (or tag) of repo matching version, newest first if None."""
    if session is None:
        with requests.Session() as own:
            return _find(own, repo, version)
    return _find(session, repo, version)