"""Package writing."""

from .package_writer import package_to_bytes, write_package

__all__ = ["package_to_bytes", "write_package"]
