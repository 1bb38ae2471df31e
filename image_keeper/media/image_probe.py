"""
Image dimension probing.

Reads natural image dimensions from bytes or files with Pillow, and decodes
substitution payloads (``file://`` paths, absolute paths, base64 data URIs)
into something that can be probed.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import base64
import binascii
import io
import logging
import os

from PIL import Image as PILImage

from ..exceptions import DimensionProbeError

logger = logging.getLogger(__name__)

FILE_SCHEME = 'file://'
BASE64_MARKER = ';base64,'


@dataclass(frozen=True)
class ImageDimensions:
    """Natural size of an image in pixels."""

    width: int
    height: int

    @property
    def is_landscape(self) -> bool:
        return self.width > self.height


def probe_image(source: Union[bytes, str, Path]) -> ImageDimensions:
    """
    Get the natural dimensions of an image.

    Args:
        source: Raw image bytes or a filesystem path

    Returns:
        ImageDimensions

    Raises:
        DimensionProbeError: If the source cannot be read or is not a recognised image
    """
    stream = io.BytesIO(source) if isinstance(source, bytes) else source
    try:
        with PILImage.open(stream) as img:
            width, height = img.size
    except (OSError, ValueError, PILImage.DecompressionBombError) as e:
        label = f"{len(source)} bytes" if isinstance(source, bytes) else str(source)
        raise DimensionProbeError("Cannot probe image", f"{label}: {e}") from e

    if width <= 0 or height <= 0:
        raise DimensionProbeError("Image has no area", f"{width}x{height}")
    return ImageDimensions(width, height)


def payload_path(payload: str) -> Optional[str]:
    """Filesystem path a payload points at, if it is a path payload."""
    if payload.startswith(FILE_SCHEME):
        return payload[len(FILE_SCHEME):]
    if os.path.isabs(payload):
        return payload
    return None


def payload_bytes(payload: str) -> Optional[bytes]:
    """
    Decode an inline ``data:<mime>;base64,<data>`` payload.

    Returns:
        Decoded bytes, or None if the payload is not a base64 data URI or is corrupt
    """
    if BASE64_MARKER not in payload:
        return None
    encoded = payload.split(BASE64_MARKER)[-1]
    try:
        return base64.b64decode(encoded)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Invalid base64 image payload: {e}")
        return None


def probe_payload(payload: str) -> Optional[ImageDimensions]:
    """
    Probe the image a substitution payload refers to.

    Remote URLs and unrecognised payloads have no dimensions; probe failures
    are logged and reported as missing dimensions too.

    Args:
        payload: Substitution payload

    Returns:
        ImageDimensions or None
    """
    path = payload_path(payload)
    if path is not None:
        source: Union[bytes, str, None] = path
    else:
        source = payload_bytes(payload)

    if source is None:
        logger.debug("Payload is not a local or inline image, no dimensions")
        return None

    try:
        return probe_image(source)
    except DimensionProbeError as e:
        logger.warning(f"Dimension probe failed: {e}")
        return None
