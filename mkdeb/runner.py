"""Running build steps in a shell and downloading source tarballs."""

from __future__ import annotations

import contextlib
import logging
import subprocess
import threading
from pathlib import Path
from typing import IO, TextIO

import humanize
import requests
from tqdm import tqdm

log = logging.getLogger(__name__)

DOWNLOAD_USER_AGENT = "mkdeb"
DOWNLOAD_TIMEOUT = 60
_CHUNK_SIZE = 64 * 1024


class CommandError(RuntimeError):
    """A build step could not be started or exited with failure."""


def interpolate_command(cmd_str: str, destdir: str | None = None, verbose: int = 0) -> str:
    """Substitute {destdir} and prefix the shell options used for build steps."""
    body = cmd_str.replace("{destdir}", destdir) if destdir is not None else cmd_str
    options = "set -xe" if verbose > 1 else "set -e"
    return f"{options}; {body}"


def _pump(
    stream: IO[str],
    label: str,
    verbose: int,
    log_file: TextIO | None,
    lock: threading.Lock,
) -> None:
    for raw in stream:
        line = raw.rstrip("\n")
        if verbose > 0:
            print(f"[{label}] {line}", flush=True)
        if log_file is not None:
            with lock:
                log_file.write(f"{line}\n")


def run_command(
    cmd_str: str,
    cwd: Path | str,
    verbose: int = 0,
    destdir: str | None = None,
    log_file_path: Path | str | None = None,
) -> None:
    """Run a build step with bash in cwd, echoing and logging its output."""
    shell_cmd = interpolate_command(cmd_str, destdir, verbose)
    lock = threading.Lock()

    with contextlib.ExitStack() as stack:
        log_file: TextIO | None = None
        if log_file_path is not None:
            try:
                log_file = stack.enter_context(open(log_file_path, "w", encoding="utf-8"))
            except OSError as exc:
                raise CommandError(
                    f"Failed to create log file {log_file_path}: {exc}"
                ) from exc

        log.debug("Running: bash -c %r in %s", shell_cmd, cwd)
        try:
            proc = subprocess.Popen(
                ["bash", "-c", shell_cmd],
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            raise CommandError(f"Failed to start command: {exc}") from exc

        with proc:
            readers = [
                threading.Thread(
                    target=_pump, args=(stream, label, verbose, log_file, lock), daemon=True
                )
                for stream, label in ((proc.stdout, "stdout"), (proc.stderr, "stderr"))
            ]
            for reader in readers:
                reader.start()
            returncode = proc.wait()
            for reader in readers:
                reader.join()

    if returncode != 0:
        raise CommandError(f"Command failed: {shell_cmd}")


def download_with_progress(url: str, dest: Path | str) -> int:
    """Download url into dest while showing progress; return the byte count."""
    with requests.get(
        url,
        headers={"User-Agent": DOWNLOAD_USER_AGENT},
        stream=True,
        timeout=DOWNLOAD_TIMEOUT,
    ) as response:
        response.raise_for_status()
        length = response.headers.get("Content-Length", "")
        total = int(length) if length.isdigit() else None

        downloaded = 0
        with open(dest, "wb") as out, tqdm(
            total=total, unit="B", unit_scale=True, desc="Downloading"
        ) as bar:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if not chunk:
                    continue
                out.write(chunk)
                downloaded += len(chunk)
                bar.update(len(chunk))
                bar.set_postfix_str(
                    f"{humanize.naturalsize(downloaded, binary=True)} downloaded"
                )
            bar.set_postfix_str("Download complete")
    return downloaded