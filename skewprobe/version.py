"""
Clock Skew Probe - Version info for ``--version``.

Installed package metadata wins; a source checkout reads pyproject.toml.
"""

from __future__ import annotations

from importlib import metadata
from pathlib import Path

DIST_NAME = "clock-skew-probe"
_FALLBACK_VERSION = "1.0.0"
_PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def _pyproject_version(pyproject: Path) -> str | None:
    try:
        import tomllib
    except ImportError:  # Python < 3.11
        return None
    try:
        with pyproject.open("rb") as fh:
            return tomllib.load(fh).get("project", {}).get("version")
    except (OSError, tomllib.TOMLDecodeError):
        return None


def get_version(pyproject: Path = _PYPROJECT) -> str:
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return _pyproject_version(pyproject) or _FALLBACK_VERSION


VERSION = get_version()
