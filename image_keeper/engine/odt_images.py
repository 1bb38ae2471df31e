"""
Dynamic image substitution for the flow (ODF) format.

ODF content has no relationship table: the payload carried in a frame's
``svg:desc`` is moved into the image's ``office:binary-data`` slot.
"""

import logging

from ..models.package import Part
from ..utils.xml_utils import parse_xml, qn, serialize_xml

logger = logging.getLogger(__name__)

CONTENT_PART = 'content.xml'


class FlowImageSubstitution:
    """
    Rewrites ``draw:frame`` images in place.

    For every frame with a non-empty description the image link and mime
    type are dropped, the description text becomes the inline binary data and
    the description is replaced by the frame's index among all frames.
    """

    def process_part(self, part: Part) -> int:
        """
        Substitute the described frames of a content part.

        Args:
            part: ``content.xml`` part

        Returns:
            Number of frames rewritten

        Raises:
            XMLParseError: If the part is not well-formed XML
        """
        root = parse_xml(part.data, part.name)

        rewritten = 0
        for index, frame in enumerate(root.iter(qn('draw:frame'))):
            desc = frame.find(qn('svg:desc'))
            image = next(frame.iter(qn('draw:image')), None)
            if desc is None or image is None or not (desc.text or '').strip():
                continue

            payload = desc.text.strip()
            for attr in (qn('xlink:href'), qn('loext:mime-type')):
                image.attrib.pop(attr, None)

            binary = image.find(qn('office:binary-data'))
            if binary is None:
                binary = image.makeelement(qn('office:binary-data'), {})
                image.insert(0, binary)
            binary.text = payload
            desc.text = str(index)
            rewritten += 1

        if rewritten:
            part.data = serialize_xml(root)
            logger.info(f"Rewrote {rewritten} frame image(s) in {part.name}")
        return rewritten
