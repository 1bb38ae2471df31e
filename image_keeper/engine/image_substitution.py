"""
Dynamic image substitution for the box-model format.

Replaces each dynamic placeholder drawing of a body, header or footer part
with its runtime payload, keeping drawing extents, relationship tables and
media parts consistent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import copy
import logging

from ..exceptions import ImageKeeperError, ParsingError, RelationshipError, XMLParseError
from ..models.drawing import Drawing
from ..models.package import Package, Part
from ..models.substitution import SubstitutionState
from ..parser.relationships import RelationshipResolver
from ..utils.xml_utils import parse_xml, scrub_literal, serialize_xml
from .image_resizer import ContainedImageResizer

logger = logging.getLogger(__name__)


@dataclass
class SubstitutionResult:
    """Outcome of processing one part."""

    part_name: str
    substituted: int = 0
    duplicated: int = 0
    errors: List[ImageKeeperError] = field(default_factory=list)


class ImageSubstitutionEngine:
    """
    Substitutes dynamic images part by part.

    Drawings are handled strictly in document order because relation id
    suffixes depend on the order the substitution state is updated.
    """

    def __init__(
        self,
        package: Package,
        resizer: Optional[ContainedImageResizer] = None,
        resolver: Optional[RelationshipResolver] = None,
        include_inline: bool = True,
        scrub_payload_text: bool = True,
    ) -> None:
        """
        Initialize substitution engine.

        Args:
            package: Package being processed (mutated in place)
            resizer: Resizer for contained images
            resolver: Relationship resolver bound to ``package``
            include_inline: Also handle ``wp:inline`` drawings
            scrub_payload_text: Replace leaked payload text after serialization
        """
        self.package = package
        self.resizer = resizer or ContainedImageResizer()
        self.resolver = resolver or RelationshipResolver(package)
        self.include_inline = include_inline
        self.scrub_payload_text = scrub_payload_text

    def substitute(
        self,
        part: Part,
        drawing: Drawing,
        payload: str,
        state: SubstitutionState,
        contained: bool = False,
        qrcode: bool = False,
    ) -> SubstitutionState:
        """
        Substitute one dynamic drawing.

        Contained drawings are resized first, then the drawing's relation is
        resolved (and cloned on reuse). The picture's description is replaced
        by the relation id it ends up using.

        Args:
            part: Part owning the drawing
            drawing: Dynamic drawing (in the part's parsed tree)
            payload: Substitution payload from the picture description
            state: Substitution state of the part
            contained: Preserve the image aspect ratio inside the template box
            qrcode: Mark the media for QR rendering

        Returns:
            The updated state

        Raises:
            RelationshipError: If the relationship graph is inconsistent
            InvalidExtentError: If a contained drawing has malformed extents
        """
        picture = drawing.picture
        if contained:
            self.resizer.apply(drawing, payload)

        used_id = self.resolver.assign(part, picture, payload, state, qrcode)
        picture.description = used_id

        logger.debug(f"Substituted drawing in {part.name} via {used_id}")
        return state

    def process_part(self, part: Part) -> SubstitutionResult:
        """
        Substitute every dynamic drawing of a part.

        A drawing that fails with a relationship error or malformed extents is
        restored to its original markup and recorded; its siblings are still
        processed. Literal payload text is scrubbed only after the tree is
        serialized, and the scrub is dropped if it would change the document's
        root element.

        Args:
            part: Body, header or footer part

        Returns:
            SubstitutionResult

        Raises:
            XMLParseError: If the part is not well-formed XML
        """
        root = parse_xml(part.data, part.name)
        result = SubstitutionResult(part.name)
        state = SubstitutionState()

        for drawing in Drawing.find_all(root, self.include_inline):
            if drawing.anchor is None or not drawing.is_dynamic:
                continue

            picture = drawing.picture
            backup = copy.deepcopy(drawing.element)
            try:
                state = self.substitute(
                    part,
                    drawing,
                    picture.description,
                    state,
                    contained=picture.contained,
                    qrcode=picture.qrcode,
                )
            except (RelationshipError, ParsingError) as e:
                drawing.element.getparent().replace(drawing.element, backup)
                logger.error(f"Image substitution failed in {part.name}: {e}")
                result.errors.append(e)
                continue
            result.substituted += 1

        result.duplicated = state.duplicates
        if not result.substituted:
            return result

        data = serialize_xml(root)
        if self.scrub_payload_text:
            data = self._scrub(part, root, data, state)
        part.data = data

        logger.info(
            f"Substituted {result.substituted} image(s) in {part.name} "
            f"({result.duplicated} duplicated)"
        )
        return result

    def _scrub(self, part: Part, root, data: str, state: SubstitutionState) -> str:
        scrubbed = data
        for payload, relation_id in state.scrubs:
            scrubbed = scrub_literal(scrubbed, payload, relation_id)
        if scrubbed == data:
            return data

        # a short payload can match markup as well as text
        try:
            intact = parse_xml(scrubbed, part.name).tag == root.tag
        except XMLParseError:
            intact = False
        if not intact:
            logger.warning(f"Payload scrub would corrupt {part.name}, keeping payload text")
            return data
        return scrubbed
