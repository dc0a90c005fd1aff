"""Package model loading."""

from .describe import PackageDescriptionError, load_package, parse_package, target_id

__all__ = ["PackageDescriptionError", "load_package", "parse_package", "target_id"]
