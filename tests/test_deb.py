import subprocess
from unittest import mock

import pytest

from mkdeb.deb import (
    ControlMetadata,
    DebError,
    build_package,
    detect_architecture,
    get_installed_version,
    install_package,
    write_control,
)


def _done(cmd, code=0, stdout=""):
    return subprocess.CompletedProcess(cmd, code, stdout=stdout, stderr="")


def test_render_defaults():
    meta = ControlMetadata(name="tool", version="1.0", arch="amd64")
    assert meta.render() == (
        "Package: tool\n"
        "Version: 1.0\n"
        "Architecture: amd64\n"
        "Maintainer: mkdeb <noreply@example.com>\n"
        "Description: Auto-packaged by mkdeb\n"
    )


def test_render_with_dependencies():
    meta = ControlMetadata(
        name="tool", version="2.1", arch="arm64",
        maintainer="Someone <someone@example.com>", description="A tool",
        deps="libc6", build_deps="gcc",
    )
    lines = meta.render().splitlines()
    assert lines[3] == "Maintainer: Someone <someone@example.com>"
    assert lines[4] == "Description: A tool"
    assert lines[5:] == ["Depends: libc6", "Build-Depends: gcc"]


def test_write_control(tmp_path):
    meta = ControlMetadata(name="tool", version="1.0", arch="amd64", deps="libc6")
    path = write_control(meta, tmp_path)
    assert path == tmp_path / "control"
    assert path.read_text() == meta.render() + "\n"


def test_detect_architecture_success():
    with mock.patch("mkdeb.deb.subprocess.run", return_value=_done([], stdout="arm64\n")) as run:
        assert detect_architecture() == "arm64"
    assert run.call_args.args[0] == ["dpkg", "--print-architecture"]


def test_detect_architecture_fallback():
    with mock.patch("mkdeb.deb.subprocess.run", return_value=_done([], code=1)):
        assert detect_architecture() == "amd64"


def test_detect_architecture_missing_tool():
    with mock.patch("mkdeb.deb.subprocess.run", side_effect=FileNotFoundError("dpkg")):
        with pytest.raises(DebError):
            detect_architecture()


def test_build_package_arguments(tmp_path):
    with mock.patch("mkdeb.deb.subprocess.run", return_value=_done([])) as run:
        build_package(tmp_path / "pkg", tmp_path / "out.deb")
    assert run.call_args.args[0] == [
        "dpkg-deb", "--build", "--root-owner-group",
        str(tmp_path / "pkg"), str(tmp_path / "out.deb"),
    ]


def test_build_package_failure(tmp_path):
    with mock.patch("mkdeb.deb.subprocess.run", return_value=_done([], code=2)):
        with pytest.raises(DebError, match="dpkg-deb build failed"):
            build_package(tmp_path, tmp_path / "x.deb")


def test_install_package_failure():
    with mock.patch("mkdeb.deb.subprocess.run", return_value=_done([], code=1)) as run:
        with pytest.raises(DebError, match="Installation failed"):
            install_package("x.deb")
    assert run.call_args.args[0] == ["sudo", "dpkg", "-i", "x.deb"]


def test_get_installed_version():
    with mock.patch("mkdeb.deb.subprocess.run", return_value=_done([], stdout="1.2.3\n")) as run:
        assert get_installed_version("tool") == "1.2.3"
    assert run.call_args.args[0] == ["dpkg-query", "-W", "-f=${Version}\n", "tool"]


def test_get_installed_version_not_installed():
    with mock.patch("mkdeb.deb.subprocess.run", return_value=_done([], code=1)):
        assert get_installed_version("tool") is None
    with mock.patch("mkdeb.deb.subprocess.run", side_effect=FileNotFoundError()):
        assert get_installed_version("tool") is None