"""Split outstanding git changes into planned commits, hunk by hunk."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("hunkplan")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
