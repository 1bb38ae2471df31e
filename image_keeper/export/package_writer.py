"""
Package writer for DOCX/ODT files.

Serializes an in-memory Package back into a zip container.
"""

from io import BytesIO
from pathlib import Path
from typing import Union
import logging
import mimetypes
import zipfile

from lxml import etree

from ..models.package import Package, Part
from ..utils.xml_utils import NAMESPACES, parse_xml, serialize_xml

logger = logging.getLogger(__name__)

CONTENT_TYPES_PART = '[Content_Types].xml'
ODF_MIMETYPE_PART = 'mimetype'


def update_content_types(package: Package) -> int:
    """
    Add ``Default`` content types for part extensions the package does not declare.

    Args:
        package: Box-model package

    Returns:
        Number of defaults added
    """
    part = package.get(CONTENT_TYPES_PART)
    if part is None:
        return 0

    ct_ns = NAMESPACES['ct']
    root = parse_xml(part.data, part.name)
    declared = {el.get('Extension', '').lower() for el in root.findall(f'{{{ct_ns}}}Default')}
    overridden = {el.get('PartName', '').lstrip('/') for el in root.findall(f'{{{ct_ns}}}Override')}

    added = 0
    for member in package:
        ext = member.extension
        if not ext or ext in declared or member.name in overridden or member is part:
            continue
        content_type = mimetypes.guess_type(f"x.{ext}")[0]
        if content_type is None:
            continue
        etree.SubElement(root, f'{{{ct_ns}}}Default', Extension=ext, ContentType=content_type)
        declared.add(ext)
        added += 1

    if added:
        part.data = serialize_xml(root)
        logger.debug(f"Added {added} content type default(s)")
    return added


def _part_bytes(part: Part) -> bytes:
    if isinstance(part.data, str):
        return part.data.encode('utf-8')
    return part.data


def package_to_bytes(package: Package) -> bytes:
    """Serialize a package (and its embeddings) into zip bytes."""
    if package.extension != 'odt':
        update_content_types(package)

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
        for part in package:
            # ODF requires an uncompressed mimetype member
            if part.name == ODF_MIMETYPE_PART:
                zf.writestr(part.name, _part_bytes(part), compress_type=zipfile.ZIP_STORED)
            else:
                zf.writestr(part.name, _part_bytes(part))
        for embedding in package.embeddings:
            zf.writestr(embedding.filename, package_to_bytes(embedding))
    return buffer.getvalue()


def write_package(package: Package, path: Union[str, Path]) -> Path:
    """
    Write a package to disk.

    Args:
        package: Package to write
        path: Output file path

    Returns:
        The output path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(package_to_bytes(package))
    logger.info(f"Wrote package {path}")
    return path
