"""
Version management for SonarMark.

The installed distribution metadata is the single source of truth for
the package version.
"""

from importlib.metadata import PackageNotFoundError, version

# Version reported when running from a source tree that was never installed
_FALLBACK_VERSION = "0.0.0"


def get_version() -> str:
    """
    Get the current version of the SonarMark package.

    Returns:
        str: Current version string
    """
    try:
        return version("sonarmark")
    except PackageNotFoundError:
        return _FALLBACK_VERSION


__version__ = get_version()
