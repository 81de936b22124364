"""Version detection for the svcat CLI."""

from __future__ import annotations

from pathlib import Path

from .logger import get_logger

logger = get_logger(__name__)

DISTRIBUTION_NAME = "svcat-provision"


def get_version(package_name: str = DISTRIBUTION_NAME) -> str:
    """Get the CLI version from package metadata or pyproject.toml.

    This function:
    1. Tries to read from installed package metadata
    2. Falls back to the repository's pyproject.toml (source checkouts)
    3. Returns "0.0.0" if version cannot be determined
    """
    try:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as get_package_version

        return get_package_version(package_name)
    except PackageNotFoundError:
        logger.debug("Distribution %s is not installed", package_name)

    try:
        import tomllib
    except ImportError:
        # tomllib not available (Python < 3.11)
        logger.debug("tomllib not available, cannot read pyproject.toml")
        return "0.0.0"

    # python/svcat/version.py -> repository root
    pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    if pyproject_path.exists():
        try:
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
            project = data.get("project", {})
            if "version" in project:
                return str(project["version"])
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read version from %s: %s", pyproject_path, e)

    logger.warning("Could not determine svcat version, using default '0.0.0'")
    return "0.0.0"


def user_agent() -> str:
    return f"svcat/{get_version()}"
