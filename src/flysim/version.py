"""Version information for Fly.

This module provides version information, read from the installed
distribution metadata when available.
"""

from importlib import metadata

# Version info
__version__ = "0.1.0"  # Fallback version
__license__ = "MIT"


def get_version() -> str:
    """Get the current version string.

    Reads the installed distribution metadata or falls back to __version__.

    Returns:
        Version string (e.g., "0.1.0").
    """
    try:
        return metadata.version("flysim")
    except metadata.PackageNotFoundError:
        return __version__


def get_about_info() -> dict[str, str]:
    """Get complete about information.

    Returns:
        Dictionary with name, version, license and description.
    """
    return {
        "name": "Fly",
        "version": get_version(),
        "license": __license__,
        "description": "Arcade flight simulator with a chase camera",
    }
