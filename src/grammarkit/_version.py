"""Version lookup for grammarkit."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """
    Return the package version.

    A source checkout reads ``[project].version`` from pyproject.toml so
    editable installs never report a stale number; otherwise the installed
    distribution metadata is used.
    """
    if _PYPROJECT.is_file():
        with _PYPROJECT.open("rb") as f:
            project = tomllib.load(f).get("project", {})
        if isinstance(project.get("version"), str):
            return project["version"]
    try:
        return _metadata_version("grammarkit")
    except PackageNotFoundError:
        return "0.0.0"
