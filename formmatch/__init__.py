"""Learn filled-in web forms and plan how to fill new ones."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("formmatch")
except PackageNotFoundError:
    __version__ = "0.0.0"
