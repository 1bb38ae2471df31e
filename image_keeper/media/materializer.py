"""
Media materialization.

After substitution, media parts hold payload strings instead of image bytes.
This module turns those payloads into binary image data: local files are
read, base64 data URIs decoded and ``qrcode://`` markers rendered to PNG.
"""

from io import BytesIO
from typing import List, Optional
import logging

import qrcode

from ..exceptions import PayloadError
from ..models.package import Package, Part
from ..parser.relationships import QRCODE_SCHEME
from .image_probe import payload_bytes, payload_path

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ('http://', 'https://')
XML_EXTENSIONS = ('xml', 'rels')


class MediaMaterializer:
    """
    Converts payload media entries into image bytes.

    Remote URLs are left untouched for a downstream fetcher. A payload that
    cannot be resolved is logged and collected in ``errors``; the remaining
    parts are still converted.
    """

    def __init__(self, box_size: int = 10, border: int = 2, fail_fast: bool = False):
        """
        Initialize materializer.

        Args:
            box_size: Pixels per QR module
            border: QR quiet zone width in modules
            fail_fast: Raise the first unresolvable payload instead of collecting it
        """
        self.box_size = box_size
        self.border = border
        self.fail_fast = fail_fast
        self.errors: List[PayloadError] = []

    def render_qrcode(self, text: str) -> bytes:
        """Render ``text`` as a PNG QR code."""
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(text)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        img_bytes = BytesIO()
        img.save(img_bytes, format='PNG')
        return img_bytes.getvalue()

    def payload_to_bytes(self, payload: str) -> Optional[bytes]:
        """
        Resolve a payload to image bytes.

        Returns:
            Image bytes, or None for remote URLs

        Raises:
            PayloadError: If a local payload cannot be read or decoded
        """
        if payload.startswith(QRCODE_SCHEME):
            return self.render_qrcode(payload[len(QRCODE_SCHEME):])
        if payload.startswith(REMOTE_SCHEMES):
            return None

        path = payload_path(payload)
        if path is not None:
            try:
                with open(path, 'rb') as f:
                    return f.read()
            except OSError as e:
                raise PayloadError("Cannot read image file", f"{path}: {e}") from e

        data = payload_bytes(payload)
        if data is None:
            raise PayloadError("Unrecognised image payload", payload[:80])
        return data

    def materialize(self, package: Package) -> int:
        """
        Materialize every payload media part of a package.

        Args:
            package: Package to update in place

        Returns:
            Number of parts converted

        Raises:
            PayloadError: If a local payload cannot be resolved and ``fail_fast`` is set
        """
        converted = 0
        for part in package:
            if not self._is_payload(part):
                continue
            try:
                data = self.payload_to_bytes(part.data)
            except PayloadError as e:
                if self.fail_fast:
                    raise
                logger.error(f"Cannot materialize {part.name}: {e}")
                self.errors.append(e)
                continue
            if data is None:
                logger.warning(f"Leaving remote payload in {part.name} for a downstream fetcher")
                continue
            part.data = data
            converted += 1
            logger.debug(f"Materialized {part.name} ({len(data)} bytes)")

        if converted:
            logger.info(f"Materialized {converted} media part(s)")
        return converted

    @staticmethod
    def _is_payload(part: Part) -> bool:
        return isinstance(part.data, str) and part.extension not in XML_EXTENSIONS
