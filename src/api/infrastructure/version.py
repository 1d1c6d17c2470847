"""Version lookup for the Portcullis API.

Reads installed package metadata, falling back to pyproject.toml when
running from a source checkout that was never installed.
"""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "portcullis"


def get_version() -> str:
    """Get the application version, e.g. ``"0.1.0"``."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        # src/api/infrastructure/version.py -> repository root
        pyproject_path = Path(__file__).resolve().parents[3] / "pyproject.toml"

        with open(pyproject_path, "rb") as f:
            pyproject_data = tomllib.load(f)

        return pyproject_data["project"]["version"]


__version__ = get_version()
