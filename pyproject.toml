[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mkdeb"
version = "0.0.1"
description = "Build and package GitHub-hosted projects into .deb files"
requires-python = ">=3.11"
keywords = ["debian", "deb", "dpkg", "packaging", "github", "build"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Packaging",
]
dependencies = [
    "requests>=2.28",
    "tqdm>=4.64",
    "tabulate>=0.9",
    "platformdirs>=3.0",
    "humanize>=4.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
mkdeb = "mkdeb.app:main"

[tool.hatch.build.targets.wheel]
packages = ["mkdeb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
