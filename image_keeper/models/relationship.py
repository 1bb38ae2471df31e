"""
Relationship models for the box-model package format.

A relationship table maps relation ids to target parts for one owning part.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Union
import logging

from lxml import etree

from ..exceptions import DuplicateRelationError
from ..utils.xml_utils import NAMESPACES, parse_xml, serialize_xml

logger = logging.getLogger(__name__)

RELS_NS = NAMESPACES['rels']
RELTYPE_IMAGE = 'http://schemas.openxmlformats.org/officeDocument/2006/relationships/image'


@dataclass(frozen=True)
class Relationship:
    """A single relationship entry."""

    id: str
    type: str
    target: str
    target_mode: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return self.target_mode == 'External'

    @classmethod
    def from_element(cls, element: etree._Element) -> "Relationship":
        return cls(
            id=element.get('Id', ''),
            type=element.get('Type', ''),
            target=element.get('Target', ''),
            target_mode=element.get('TargetMode'),
        )


class RelationshipTable:
    """
    Typed view over a ``.rels`` part.

    Entries are read from and written back to the underlying XML tree, so
    attributes this class does not model survive a round trip.
    """

    def __init__(self, name: str, root: etree._Element):
        """
        Initialize relationship table.

        Args:
            name: Name of the ``.rels`` part
            root: Parsed ``Relationships`` element
        """
        self.name = name
        self.root = root

    @classmethod
    def parse(cls, name: str, data: Union[str, bytes]) -> "RelationshipTable":
        return cls(name, parse_xml(data, name))

    def _elements(self) -> List[etree._Element]:
        return self.root.findall(f'{{{RELS_NS}}}Relationship')

    def __iter__(self) -> Iterator[Relationship]:
        return (Relationship.from_element(el) for el in self._elements())

    def __len__(self) -> int:
        return len(self._elements())

    def ids(self) -> List[str]:
        return [rel.id for rel in self]

    def get(self, relation_id: str) -> Optional[Relationship]:
        """Get relationship by id, or None."""
        for rel in self:
            if rel.id == relation_id:
                return rel
        return None

    def append(self, relationship: Relationship) -> None:
        """
        Append a relationship entry.

        Raises:
            DuplicateRelationError: If the id is already taken
        """
        if relationship.id in self.ids():
            raise DuplicateRelationError(
                f"Relation id '{relationship.id}' already exists", self.name
            )

        element = etree.SubElement(self.root, f'{{{RELS_NS}}}Relationship')
        element.set('Id', relationship.id)
        element.set('Type', relationship.type)
        element.set('Target', relationship.target)
        if relationship.target_mode:
            element.set('TargetMode', relationship.target_mode)
        logger.debug(f"Appended relation {relationship.id} -> {relationship.target} to {self.name}")

    def to_xml(self) -> str:
        return serialize_xml(self.root)
