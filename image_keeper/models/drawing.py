"""
Drawing models for the box-model document format.

Typed accessors over the ``w:drawing`` sub-tree: the positioning wrapper
(anchor), the picture, its blip reference and its extents.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

from lxml import etree

from ..exceptions import InvalidExtentError
from ..utils.xml_utils import qn

logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', '1')
PICTURE_PATH = f"{qn('a:graphic')}/{qn('a:graphicData')}/{qn('pic:pic')}"


def parse_flag(value: Optional[str]) -> bool:
    """Interpret an xsd:boolean-like attribute value."""
    return value is not None and value.strip().lower() in TRUE_VALUES


@dataclass
class BoxSize:
    """Extent of a drawing in EMU."""

    cx: int
    cy: int

    @classmethod
    def from_element(cls, element: etree._Element) -> "BoxSize":
        """
        Read ``cx``/``cy`` from an extent element.

        Raises:
            InvalidExtentError: If either value is not an integer
        """
        cx, cy = element.get('cx', '0'), element.get('cy', '0')
        try:
            return cls(int(cx), int(cy))
        except ValueError as e:
            tag = etree.QName(element).localname
            raise InvalidExtentError("Invalid drawing extent", f"{tag} cx={cx!r} cy={cy!r}") from e

    def apply(self, element: etree._Element) -> None:
        element.set('cx', str(self.cx))
        element.set('cy', str(self.cy))


class BlipFill:
    """Reference from a picture to its binary data."""

    def __init__(self, element: etree._Element):
        self.element = element
        self.blip = element.find(qn('a:blip'))

    @property
    def embed(self) -> Optional[str]:
        if self.blip is None:
            return None
        return self.blip.get(qn('r:embed'))

    @embed.setter
    def embed(self, relation_id: str) -> None:
        self.blip.set(qn('r:embed'), relation_id)


class Picture:
    """
    A ``pic:pic`` element.

    The substitution payload and the placeholder flags live on
    ``pic:nvPicPr/pic:cNvPr``: ``descr`` holds the payload while ``dynamic``,
    ``contains`` and ``qrcode`` are plain boolean attributes written by the
    templating stage.
    """

    def __init__(self, element: etree._Element):
        self.element = element
        self.properties = element.find(f"{qn('pic:nvPicPr')}/{qn('pic:cNvPr')}")

    def _attr(self, name: str) -> Optional[str]:
        if self.properties is None:
            return None
        return self.properties.get(name)

    @property
    def raw_description(self) -> Optional[str]:
        """The ``descr`` attribute, or None when it is absent."""
        return self._attr('descr')

    @property
    def description(self) -> str:
        return self._attr('descr') or ''

    @description.setter
    def description(self, value: str) -> None:
        self.properties.set('descr', value)

    @property
    def dynamic(self) -> bool:
        return parse_flag(self._attr('dynamic'))

    @property
    def contained(self) -> bool:
        return parse_flag(self._attr('contains'))

    @property
    def qrcode(self) -> bool:
        return parse_flag(self._attr('qrcode'))

    @property
    def blip_fill(self) -> Optional[BlipFill]:
        element = self.element.find(qn('pic:blipFill'))
        return BlipFill(element) if element is not None else None

    def _shape_extent_element(self) -> Optional[etree._Element]:
        return self.element.find(f"{qn('pic:spPr')}/{qn('a:xfrm')}/{qn('a:ext')}")

    @property
    def shape_extent(self) -> Optional[BoxSize]:
        element = self._shape_extent_element()
        return BoxSize.from_element(element) if element is not None else None

    def set_shape_extent(self, box: BoxSize) -> None:
        element = self._shape_extent_element()
        if element is not None:
            box.apply(element)


class Anchor:
    """Positioning wrapper of a drawing (``wp:anchor`` or ``wp:inline``)."""

    def __init__(self, element: etree._Element):
        self.element = element

    @property
    def is_inline(self) -> bool:
        return self.element.tag == qn('wp:inline')

    @property
    def extent(self) -> Optional[BoxSize]:
        element = self.element.find(qn('wp:extent'))
        return BoxSize.from_element(element) if element is not None else None

    def set_extent(self, box: BoxSize) -> None:
        element = self.element.find(qn('wp:extent'))
        if element is not None:
            box.apply(element)


class Drawing:
    """One ``w:drawing`` placement."""

    def __init__(self, element: etree._Element, include_inline: bool = True):
        self.element = element
        self.include_inline = include_inline

    @classmethod
    def find_all(cls, root: etree._Element, include_inline: bool = True) -> List["Drawing"]:
        """All drawings below ``root`` in document order."""
        return [cls(el, include_inline) for el in root.iter(qn('w:drawing'))]

    def _wrapper_tags(self) -> List[str]:
        tags = [qn('wp:anchor')]
        if self.include_inline:
            tags.append(qn('wp:inline'))
        return tags

    @property
    def anchor(self) -> Optional[Anchor]:
        for child in self.element:
            if child.tag in self._wrapper_tags():
                return Anchor(child)
        return None

    @property
    def picture(self) -> Optional[Picture]:
        """
        The picture placed by this drawing's own wrapper.

        Pictures of drawings nested in a text box belong to those inner
        drawings, so only ``wrapper/a:graphic/a:graphicData/pic:pic`` is used.
        """
        anchor = self.anchor
        if anchor is None:
            return None
        element = anchor.element.find(PICTURE_PATH)
        return Picture(element) if element is not None else None

    @property
    def is_dynamic(self) -> bool:
        """Dynamic placeholder carrying a payload."""
        picture = self.picture
        return picture is not None and picture.dynamic and bool(picture.description)

    @property
    def is_unreplaced(self) -> bool:
        """Dynamic placeholder whose ``descr`` is present but empty."""
        picture = self.picture
        return picture is not None and picture.dynamic and picture.raw_description == ''

    def detach_anchor(self) -> bool:
        """
        Remove the positioning wrapper so the drawing takes no layout space.

        Returns:
            True if a wrapper was removed
        """
        anchor = self.anchor
        if anchor is None:
            return False
        self.element.remove(anchor.element)
        return True
