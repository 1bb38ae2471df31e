"""
Relationship resolution for dynamic images.

Maps a picture's blip reference to its relationship entry and media part,
and clones relationship + media entries when a placeholder is instantiated
more than once in the same part.
"""

from typing import Tuple
import logging
import posixpath

from ..exceptions import (
    DuplicateRelationError,
    MediaNotFoundError,
    RelationNotFoundError,
    RelationshipError,
)
from ..models.drawing import Picture
from ..models.package import Package, Part
from ..models.relationship import Relationship, RelationshipTable
from ..models.substitution import SubstitutionState

logger = logging.getLogger(__name__)

QRCODE_SCHEME = 'qrcode://'


def rels_name_for(part_name: str) -> str:
    """
    Name of the relationship part owned by ``part_name``.

    ``word/header1.xml`` -> ``word/_rels/header1.xml.rels``
    """
    directory, base = posixpath.split(part_name)
    return posixpath.join(directory, '_rels', f"{base}.rels")


def resolve_target(part_name: str, target: str) -> str:
    """Package name of a relationship target, relative to its owning part."""
    if target.startswith('/'):
        return target.lstrip('/')
    return posixpath.normpath(posixpath.join(posixpath.dirname(part_name), target))


def numbered_target(target: str, occurrence: int) -> str:
    """Insert the occurrence number before the target's extension."""
    stem, ext = posixpath.splitext(target)
    return f"{stem}_{occurrence}{ext}"


def media_payload(payload: str, qrcode: bool) -> str:
    """Data written to a media entry for a payload."""
    return f"{QRCODE_SCHEME}{payload}" if qrcode else payload


class RelationshipResolver:
    """
    Resolves and rewrites image relationships of one package.

    Handles relationship table lookup, media lookup and relation id
    allocation for repeated placeholders.
    """

    def __init__(self, package: Package):
        """
        Initialize relationship resolver.

        Args:
            package: Package whose parts are resolved and mutated
        """
        self.package = package

    def table_part_for(self, part: Part) -> Part:
        """
        Get the relationship part owned by ``part``.

        Raises:
            RelationshipError: If the package has no such part
        """
        name = rels_name_for(part.name)
        table_part = self.package.get(name)
        if table_part is None:
            raise RelationshipError("Relationship table not found", name)
        return table_part

    def load_table(self, part: Part) -> Tuple[Part, RelationshipTable]:
        table_part = self.table_part_for(part)
        return table_part, RelationshipTable.parse(table_part.name, table_part.data)

    def resolve(self, part: Part, picture: Picture) -> str:
        """
        Get the relation id a picture's blip refers to.

        Args:
            part: Part owning the picture
            picture: Picture to resolve

        Returns:
            Relation id

        Raises:
            RelationNotFoundError: If the blip has no reference or the table lacks it
        """
        blip_fill = picture.blip_fill
        relation_id = blip_fill.embed if blip_fill is not None else None
        _, table = self.load_table(part)
        if not relation_id or table.get(relation_id) is None:
            raise RelationNotFoundError(relation_id or '', table.name)
        return relation_id

    def media_for(self, part: Part, relationship: Relationship) -> Part:
        """
        Get the media part a relationship targets.

        Raises:
            MediaNotFoundError: If the target is external or missing from the package
        """
        name = resolve_target(part.name, relationship.target)
        media = None if relationship.is_external else self.package.get(name)
        if media is None:
            raise MediaNotFoundError(name, relationship.id)
        return media

    def duplicate(self, part: Part, relation_id: str, occurrence: int,
                  payload: str) -> Relationship:
        """
        Clone a relationship and its media for another instance of a placeholder.

        The new id is ``<relation_id>_<occurrence>`` and the new target gets
        the occurrence inserted before its extension. All collisions are
        checked before anything is written.

        Args:
            part: Part owning the relationship table
            relation_id: Relation id being reused
            occurrence: Occurrence number of this reuse (2 for the first clone)
            payload: Data of the new media entry

        Returns:
            The appended relationship

        Raises:
            RelationNotFoundError: If ``relation_id`` is not in the table
            MediaNotFoundError: If the original media part is missing
            DuplicateRelationError: If the new id or media name is already taken
        """
        table_part, table = self.load_table(part)
        original = table.get(relation_id)
        if original is None:
            raise RelationNotFoundError(relation_id, table.name)
        self.media_for(part, original)

        clone = Relationship(
            id=f"{relation_id}_{occurrence}",
            type=original.type,
            target=numbered_target(original.target, occurrence),
            target_mode=original.target_mode,
        )
        media_name = resolve_target(part.name, clone.target)
        if table.get(clone.id) is not None:
            raise DuplicateRelationError(f"Relation id '{clone.id}' already exists", table.name)
        if media_name in self.package:
            raise DuplicateRelationError(f"Media '{media_name}' already exists", table.name)

        table.append(clone)
        table_part.data = table.to_xml()
        self.package.add(Part(media_name, payload))

        logger.debug(f"Duplicated {relation_id} as {clone.id} -> {media_name}")
        return clone

    def assign(self, part: Part, picture: Picture, payload: str,
               state: SubstitutionState, qrcode: bool = False) -> str:
        """
        Point a dynamic picture's media at its payload.

        The first use of a relation id in a part repoints the existing media
        entry. Each further use clones the relationship and media entry and
        rewires this picture's blip to the clone.

        Args:
            part: Part owning the picture
            picture: Dynamic picture
            payload: Substitution payload
            state: Substitution state of the part (updated in place)
            qrcode: Write a QR marker instead of the raw payload

        Returns:
            The relation id the picture now refers to
        """
        relation_id = self.resolve(part, picture)
        data = media_payload(payload, qrcode)
        occurrence = state.next_occurrence(relation_id)

        if occurrence == 1:
            _, table = self.load_table(part)
            media = self.media_for(part, table.get(relation_id))
            media.data = data
            used_id = relation_id
            logger.debug(f"Repointed {media.name} to payload via {relation_id}")
        else:
            clone = self.duplicate(part, relation_id, occurrence, data)
            picture.blip_fill.embed = clone.id
            used_id = clone.id

        state.commit(relation_id, occurrence, payload, used_id)
        return used_id

