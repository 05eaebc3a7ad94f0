"""Utilities for accessing packaged resource files."""

from __future__ import annotations

from pathlib import Path

_RESOURCE_ROOT = Path(__file__).resolve().parent


def resource_path(*parts: str) -> Path:
    """Return the path to a resource stored alongside the package.

    Parameters
    ----------
    parts:
        One or more path components relative to the resources directory.
    """

    path = _RESOURCE_ROOT.joinpath(*parts)
    if not path.exists():
        raise FileNotFoundError(f"Resource not found: {path}")
    return path


def default_app_settings_json() -> Path:
    """Return the default application settings JSON file."""

    return resource_path("app_settings.json")


__all__ = ["default_app_settings_json", "resource_path"]
