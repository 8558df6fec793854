"""Configuration constants.

Values here are not user-configurable. For configurable values, see models.py.
"""

CONFIG_DIR_NAME = ".zga"
"""Per-project configuration directory, created next to ``Assets/``."""

CONFIG_FILE_NAME = "config.yaml"

CSHARP_SUFFIX = ".cs"
"""Only files with this suffix are analyzed."""

PROJECT_ROOT_MARKERS = ("Assets", "ProjectSettings")
"""Directories whose presence marks a Unity project root."""

SKIPPED_DIR_NAMES = frozenset({".git", ".zga", "Library", "Temp", "Logs", "obj", "Build", "Builds"})
"""Directories never descended into during file discovery.

``Library/PackageCache`` sources are still classified as excluded when passed
explicitly; discovery simply avoids walking Unity's generated folders.
"""
