"""Symbol graph selection and orchestration for Swift-DocC builds."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("symdoc")
except PackageNotFoundError:  # pragma: no cover - package metadata absent in dev mode
    __version__ = "0.0.0"

__all__ = ["__version__"]
