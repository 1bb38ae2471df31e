"""
Empty image cleaner.

Collapses dynamic placeholders that received no payload so they take no
layout space.
"""

import logging

from ..models.drawing import Drawing
from ..models.package import Part
from ..utils.xml_utils import parse_xml, serialize_xml

logger = logging.getLogger(__name__)


class EmptyImageCleaner:
    """
    Detaches the anchors of unreplaced dynamic drawings.

    A drawing is unreplaced when its picture is flagged ``dynamic`` but its
    description is empty. Only the positioning wrapper is removed: the
    ``w:drawing`` element and the relationship table stay as they are.
    """

    def __init__(self, include_inline: bool = True):
        self.include_inline = include_inline
        self.cleaned = 0

    def clean(self, part: Part) -> Part:
        """
        Clean a part in place.

        The part text is only rewritten when a drawing was detached, so
        cleaning an already clean part leaves it byte-identical.

        Args:
            part: Body, header or footer part

        Returns:
            The same part

        Raises:
            XMLParseError: If the part is not well-formed XML
        """
        root = parse_xml(part.data, part.name)

        detached = 0
        for drawing in Drawing.find_all(root, self.include_inline):
            if drawing.is_unreplaced and drawing.detach_anchor():
                detached += 1

        if detached:
            part.data = serialize_xml(root)
            self.cleaned += detached
            logger.info(f"Removed {detached} empty image(s) from {part.name}")

        return part
