"""Build GitHub-hosted projects from source and package them as .deb files."""

__version__ = "0.0.1"
__all__ = ["__version__"]