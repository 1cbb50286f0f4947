# mkdeb

Build GitHub-hosted projects from source and package them as `.deb` files.

mkdeb reads the configured packages and, for each one, finds a GitHub release.
If no release matches, it looks at the tags. It downloads the source tarball and
unpacks it. It then runs your configure, build and install steps in `bash` and
wraps the result with `dpkg-deb`. It can also install the package it built.

## Requirements

- A Debian-based system with `dpkg`, `dpkg-deb` and `dpkg-query`
- `bash`
- `sudo`, if you want mkdeb to install packages

## Installation

```
pip install .
```

## Configuration

mkdeb reads every `*.toml` file in its configuration directory. By default this
is `mkdeb` inside your user configuration directory, for example
`~/.config/mkdeb`. Use `-c DIR` to read a different directory.

Each file must have a `[package]` table that holds one or more
`[package.<name>]` tables:

```toml
[package.hello]
repo = "example/hello"
version = "1.2.3"            # optional; first release or tag listed when omitted
configure = "./configure --prefix=/usr"
build = "make -j"
install = "make install DESTDIR={destdir}"
deps = "libc6"
build_deps = "build-essential"
maintainer = "Packager <packager@example.com>"
description = "Hello world program"
```

Only `repo` is required, and every field must be a string. Before each step
runs, `{destdir}` is replaced with the staging directory that becomes the
package root. Each step runs under `set -e`, so it fails on the first failing
command. Each package name may appear only once across all configuration files.

### Versions

mkdeb takes the package version from the release or tag name:

- `v1.2.3` gives `1.2.3`
- `1.2.3` stays `1.2.3`
- Other release names use the publication date with `-`, `:`, `T` and `Z`
  removed, for example `20240102030405`. A tag with no date gives `0.0.0`.

If `version` is set, mkdeb uses the first release, or else the first tag, whose
derived version matches it.

When the control file is written, `Maintainer` defaults to
`mkdeb <noreply@example.com>` and `Description` defaults to
`Auto-packaged by mkdeb`. The `Depends` and `Build-Depends` lines are written
only when `deps` and `build_deps` are set.

## Usage

Run with no arguments to list all configured packages. For each package, the
list shows the installed version (`none` if it is not installed) and the
version that mkdeb would build (`(not found)` if there is none):

```
mkdeb
```

Build every package:

```
mkdeb --all
```

Build some packages and install them:

```
mkdeb -p hello,world --install
```

With `--install`, a package may already be installed at the version that would
be built. mkdeb then logs that, and stops without building that package or any
package after it.

List only some packages:

```
mkdeb -l -p hello
```

Built packages are written to the current directory as `<name>-<version>.deb`.
mkdeb builds in a new temporary directory unless you pass `--build-root`. With
`--build-root`, it builds in `<build-root>/<name>-<version>`. mkdeb stops at the
first package that fails and exits with status 1.

### Options

| Option | Meaning |
| --- | --- |
| `-V`, `--version` | Print the version and exit |
| `-v`, `-vv` | Echo step output; `-vv` also traces shell commands (`set -x`) |
| `-d`, `--debug` | Show debug logging |
| `-c`, `--config DIR` | Configuration directory |
| `-i`, `--install` | Install the built package with `sudo dpkg -i` unless the same version is installed |
| `-l`, `--list` | List installed and configured versions |
| `-a`, `--all` | Operate on all packages |
| `-p NAMES` | Comma-separated list of packages |
| `--log` | Write a log file for each step, named `<name>-<step>-<timestamp>.log` |
| `--log-dir DIR` | Where step logs are written (default `./logs`) |
| `--build-root DIR` | Build in this directory instead of a temporary one |

Either `--all` or `-p` is needed when other options are given.

## What mkdeb does not do

mkdeb does not resolve or install build dependencies, and it does not sign
packages. It does not keep a repository of the packages it built, and it does
not clean up temporary build directories. It does not authenticate to GitHub,
so it is subject to the API's anonymous rate limits.