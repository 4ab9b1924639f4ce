"""
odpwriter Version Management - single source of truth for the package version.

The generator string written into meta.xml is derived from here so every
part writer reports the same version.
"""

# =============================================================================
# odpwriter Version - Single Source of Truth
# =============================================================================

__version__ = "0.4.0"

# Semantic versioning components
VERSION_MAJOR = 0
VERSION_MINOR = 4
VERSION_PATCH = 0
VERSION_SUFFIX = ""  # e.g., "alpha", "beta", "rc1", ""

# Full version string with optional suffix
VERSION_FULL = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"
if VERSION_SUFFIX:
    VERSION_FULL = f"{VERSION_FULL}-{VERSION_SUFFIX}"


def get_version() -> str:
    """Get the current odpwriter version string."""
    return __version__


def get_generator() -> str:
    """Generator tag stored in the package metadata."""
    return f"odpwriter/{VERSION_FULL}"
