"""Package loading and relationship resolution."""

from .package_reader import read_package
from .relationships import RelationshipResolver

__all__ = ["read_package", "RelationshipResolver"]
