"""Version number."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fsformats")
except PackageNotFoundError:
    # source checkout without installed metadata
    __version__ = "0.3.0-dev"
