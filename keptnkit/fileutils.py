"""File helpers that understand ``~`` as the user's home directory."""

from __future__ import annotations

import os
import sys


def user_home_dir() -> str:
    """Return the user's home directory from the environment."""
    if sys.platform.startswith("win"):
        home = os.environ.get("HOMEDRIVE", "") + os.environ.get("HOMEPATH", "")
        return home or os.environ.get("USERPROFILE", "")
    return os.environ.get("HOME", "")


def expand_tilde(file_name: str) -> str:
    """Replace a leading ``~`` or ``~/`` with the user's home directory."""
    if file_name == "~":
        return user_home_dir()
    if file_name.startswith("~/"):
        return os.path.normpath(os.path.join(user_home_dir(), file_name[2:]))
    return file_name


def read_file(file_name: str) -> bytes:
    """Return the content of a file; raises ``FileNotFoundError`` if missing."""
    path = expand_tilde(file_name)
    if not os.path.lexists(path):
        raise FileNotFoundError(f"Cannot find file {path}")
    with open(path, "rb") as handle:
        return handle.read()


def read_file_as_str(file_name: str) -> str:
    """Return the content of a file as text."""
    return read_file(file_name).decode("utf-8")


def file_exists(file_name: str) -> bool:
    """Return whether the path exists and is not a directory."""
    path = expand_tilde(file_name)
    return os.path.exists(path) and not os.path.isdir(path)