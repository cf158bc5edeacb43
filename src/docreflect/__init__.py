"""docreflect: doc comment extraction and tag propagation for reflection trees."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("docreflect")
except PackageNotFoundError:
    __version__ = "dev"
