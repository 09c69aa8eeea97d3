"""Filesystem helpers for configuration storage."""

from pathlib import Path


def get_app_dir() -> Path:
    """Return the netexport configuration directory under the user's home."""

    return Path.home() / '.netexport'


__all__ = ['get_app_dir']
