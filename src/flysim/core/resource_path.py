"""Resource path resolution.

Configuration files ship inside the package (``flysim/config``) so that they
are found both from a source checkout and from an installed wheel.

Typical usage:
    from flysim.core.resource_path import get_config_path

    settings_file = get_config_path("flysim.yaml")
"""

from pathlib import Path

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def get_package_root() -> Path:
    """Get the root directory of the flysim package."""
    return _PACKAGE_ROOT


def get_config_dir() -> Path:
    """Get the directory holding the bundled configuration files."""
    return get_package_root() / "config"


def get_config_path(relative_path: str) -> Path:
    """Get the path of a bundled configuration file.

    Args:
        relative_path: Path relative to the config directory (e.g., "logging.yaml").

    Returns:
        Absolute path to the file. The file is not required to exist.
    """
    return get_config_dir() / relative_path
