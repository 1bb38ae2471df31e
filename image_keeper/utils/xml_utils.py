"""
XML utilities for document parts.

Handles namespace constants, part parsing and serialization.
"""

from typing import Dict, Union
from xml.sax.saxutils import escape
import logging

from lxml import etree

from ..exceptions import XMLParseError

logger = logging.getLogger(__name__)

NAMESPACES: Dict[str, str] = {
    'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main',
    'wp': 'http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing',
    'a': 'http://schemas.openxmlformats.org/drawingml/2006/main',
    'pic': 'http://schemas.openxmlformats.org/drawingml/2006/picture',
    'r': 'http://schemas.openxmlformats.org/officeDocument/2006/relationships',
    'rels': 'http://schemas.openxmlformats.org/package/2006/relationships',
    'ct': 'http://schemas.openxmlformats.org/package/2006/content-types',
}

ODF_NAMESPACES: Dict[str, str] = {
    'office': 'urn:oasis:names:tc:opendocument:xmlns:office:1.0',
    'draw': 'urn:oasis:names:tc:opendocument:xmlns:drawing:1.0',
    'svg': 'urn:oasis:names:tc:opendocument:xmlns:svg-compatible:1.0',
    'xlink': 'http://www.w3.org/1999/xlink',
    'loext': 'urn:org:documentfoundation:names:experimental:office:xmlns:loext:1.0',
}


def qn(tag: str) -> str:
    """
    Expand a prefixed name (``"w:drawing"``) into Clark notation.

    Args:
        tag: Prefixed tag or attribute name

    Returns:
        ``{namespace}local`` string
    """
    prefix, local = tag.split(':', 1)
    uri = NAMESPACES.get(prefix) or ODF_NAMESPACES[prefix]
    return f"{{{uri}}}{local}"


def parse_xml(data: Union[str, bytes], part_name: str = "<part>") -> etree._Element:
    """
    Parse a part's serialized XML.

    Args:
        data: Serialized XML (text or bytes)
        part_name: Part name used in error messages

    Returns:
        Root element

    Raises:
        XMLParseError: If the data is not well-formed XML
    """
    if isinstance(data, str):
        data = data.encode('utf-8')
    if not data:
        raise XMLParseError(part_name, "empty part")

    parser = etree.XMLParser(resolve_entities=False, huge_tree=True)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        raise XMLParseError(part_name, str(e)) from e

    logger.debug(f"Parsed {part_name}: {etree.QName(root).localname}")
    return root


def serialize_xml(root: etree._Element) -> str:
    """Serialize a part tree back to text with a standalone XML declaration."""
    return etree.tostring(
        root, xml_declaration=True, encoding='UTF-8', standalone=True
    ).decode('utf-8')


def scrub_literal(data: str, literal: str, replacement: str) -> str:
    """
    Replace every literal occurrence of a string in serialized XML.

    Matches the raw text as well as its escaped text and attribute forms,
    since the serializer may have escaped ``&``, ``<``, ``>`` or ``"``.
    """
    if not literal:
        return data
    forms = [literal, escape(literal), escape(literal, {'"': '&quot;'})]
    for form in dict.fromkeys(forms):
        data = data.replace(form, replacement)
    return data
