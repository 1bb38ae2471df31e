"""Builders for small in-memory DOCX/ODT packages used across the tests."""

import base64
import io
from typing import Dict, List, Optional
from xml.sax.saxutils import quoteattr

from PIL import Image as PILImage

from image_keeper.models.package import Package, Part

DOC_NAMESPACES = (
    'xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main" '
    'xmlns:wp="http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing" '
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships" '
    'xmlns:wps="http://schemas.microsoft.com/office/word/2010/wordprocessingShape"'
)
IMAGE_TYPE = 'http://schemas.openxmlformats.org/officeDocument/2006/relationships/image'


def drawing_xml(descr: Optional[str] = "", dynamic: Optional[str] = "true", rel_id: str = "rId5",
                contains: Optional[str] = None, qrcode: Optional[str] = None,
                cx: int = 4000, cy: int = 4000, wrapper: str = "anchor") -> str:
    """Markup of one ``w:drawing`` with a picture placeholder (``descr=None`` omits the attribute)."""
    flags = "" if descr is None else f" descr={quoteattr(descr)}"
    if dynamic is not None:
        flags += f' dynamic="{dynamic}"'
    if contains is not None:
        flags += f' contains="{contains}"'
    if qrcode is not None:
        flags += f' qrcode="{qrcode}"'
    return (
        f'<w:drawing><wp:{wrapper} distT="0" distB="0">'
        f'<wp:extent cx="{cx}" cy="{cy}"/>'
        f'<wp:docPr id="1" name="Picture"/>'
        f'<a:graphic><a:graphicData uri="http://schemas.openxmlformats.org/drawingml/2006/picture">'
        f'<pic:pic><pic:nvPicPr><pic:cNvPr id="0" name="image.png"{flags}/>'
        f'<pic:cNvPicPr/></pic:nvPicPr>'
        f'<pic:blipFill><a:blip r:embed="{rel_id}"/><a:stretch><a:fillRect/></a:stretch></pic:blipFill>'
        f'<pic:spPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm>'
        f'<a:prstGeom prst="rect"/></pic:spPr>'
        f'</pic:pic></a:graphicData></a:graphic>'
        f'</wp:{wrapper}></w:drawing>'
    )


def textbox_xml(*drawings: str, cx: int = 6000, cy: int = 3000) -> str:
    """Markup of an anchored text box shape whose content holds ``drawings``."""
    paragraphs = "".join(f"<w:p><w:r>{d}</w:r></w:p>" for d in drawings)
    return (
        f'<w:drawing><wp:anchor distT="0" distB="0">'
        f'<wp:extent cx="{cx}" cy="{cy}"/>'
        f'<wp:docPr id="2" name="Text Box"/>'
        f'<a:graphic><a:graphicData uri="http://schemas.microsoft.com/office/word/2010/wordprocessingShape">'
        f'<wps:wsp><wps:spPr><a:xfrm><a:off x="0" y="0"/><a:ext cx="{cx}" cy="{cy}"/></a:xfrm></wps:spPr>'
        f'<wps:txbx><w:txbxContent>{paragraphs}</w:txbxContent></wps:txbx>'
        f'<wps:bodyPr/></wps:wsp>'
        f'</a:graphicData></a:graphic>'
        f'</wp:anchor></w:drawing>'
    )


def document_xml(*drawings: str, root: str = "document", extra_text: str = "") -> str:
    """Wrap drawings into a body (or ``hdr``/``ftr``) part, one paragraph each."""
    paragraphs = "".join(f"<w:p><w:r>{d}</w:r></w:p>" for d in drawings)
    if extra_text:
        paragraphs += f"<w:p><w:r><w:t>{extra_text}</w:t></w:r></w:p>"
    body = f"<w:body>{paragraphs}</w:body>" if root == "document" else paragraphs
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:{root} {DOC_NAMESPACES}>{body}</w:{root}>'
    )


def rels_xml(targets: Dict[str, str]) -> str:
    """Relationship part mapping ids to image targets."""
    entries = "".join(
        f'<Relationship Id="{rel_id}" Type="{IMAGE_TYPE}" Target="{target}"/>'
        for rel_id, target in targets.items()
    )
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        f'{entries}</Relationships>'
    )


def png_bytes(width: int, height: int) -> bytes:
    """A blank PNG of the given size."""
    buffer = io.BytesIO()
    PILImage.new("RGB", (width, height), "white").save(buffer, format="PNG")
    return buffer.getvalue()


def data_uri(width: int, height: int) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(width, height)).decode("ascii")


def make_docx(body: str, rels: Optional[Dict[str, str]] = None,
              media: Optional[List[str]] = None, extra_parts: Optional[List[Part]] = None) -> Package:
    """Build an in-memory DOCX package."""
    rels = {"rId5": "media/image1.png"} if rels is None else rels
    media = list(dict.fromkeys(rels.values())) if media is None else media
    parts = [
        Part("[Content_Types].xml", CONTENT_TYPES),
        Part("word/document.xml", body),
        Part("word/_rels/document.xml.rels", rels_xml(rels)),
    ]
    parts += [Part(f"word/{name}", png_bytes(2, 2)) for name in media]
    parts += extra_parts or []
    return Package(filename="report.docx", extension="docx", parts=parts)


CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Default Extension="png" ContentType="image/png"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    '</Types>'
)

ODT_CONTENT = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    '<office:document-content '
    'xmlns:office="urn:oasis:names:tc:opendocument:xmlns:office:1.0" '
    'xmlns:draw="urn:oasis:names:tc:opendocument:xmlns:drawing:1.0" '
    'xmlns:svg="urn:oasis:names:tc:opendocument:xmlns:svg-compatible:1.0" '
    'xmlns:xlink="http://www.w3.org/1999/xlink" '
    'xmlns:loext="urn:org:documentfoundation:names:experimental:office:xmlns:loext:1.0" '
    'xmlns:text="urn:oasis:names:tc:opendocument:xmlns:text:1.0">'
    '<office:body><office:text>'
    '<text:p><draw:frame draw:name="Logo">'
    '<draw:image xlink:href="Pictures/logo.png" xlink:type="simple" loext:mime-type="image/png"/>'
    '<svg:desc>http://img/logo.png</svg:desc></draw:frame></text:p>'
    '<text:p><draw:frame draw:name="Static">'
    '<draw:image xlink:href="Pictures/static.png" loext:mime-type="image/png"/></draw:frame></text:p>'
    '<text:p><draw:frame draw:name="Photo">'
    '<draw:image xlink:href="Pictures/photo.png" loext:mime-type="image/png"/>'
    '<svg:desc>file:///tmp/photo.png</svg:desc></draw:frame></text:p>'
    '</office:text></office:body></office:document-content>'
)


