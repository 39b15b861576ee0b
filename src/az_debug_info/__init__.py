"""Azure Debug Info."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("azure-debug-info")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
