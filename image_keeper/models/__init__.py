"""Typed models for packages, drawings and relationships."""

from .package import Package, Part
from .drawing import Anchor, BlipFill, BoxSize, Drawing, Picture
from .relationship import Relationship, RelationshipTable
from .substitution import SubstitutionState

__all__ = [
    "Package",
    "Part",
    "Anchor",
    "BlipFill",
    "BoxSize",
    "Drawing",
    "Picture",
    "Relationship",
    "RelationshipTable",
    "SubstitutionState",
]
