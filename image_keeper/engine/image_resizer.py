"""
Contained image resizing.

Fits a substituted image into the box declared by the template while
keeping the image's aspect ratio.
"""

from typing import Callable, Optional
import logging
import math

from ..media.image_probe import ImageDimensions, probe_payload
from ..models.drawing import BoxSize, Drawing

logger = logging.getLogger(__name__)

Prober = Callable[[str], Optional[ImageDimensions]]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ContainedImageResizer:
    """
    Computes aspect-preserving extents for "contained" placeholders.

    Landscape images keep the template width, portrait and square images keep
    the template height. Without dimensions the box collapses to zero.
    """

    def __init__(self, prober: Optional[Prober] = None):
        """
        Initialize resizer.

        Args:
            prober: Callable mapping a payload to its dimensions (defaults to Pillow probing)
        """
        self.prober = prober or probe_payload

    def fit(self, box: BoxSize, dimensions: Optional[ImageDimensions]) -> BoxSize:
        """
        Fit natural dimensions into a template box.

        Args:
            box: Template-declared extents
            dimensions: Natural image size, or None when unknown

        Returns:
            New extents
        """
        if dimensions is None:
            return BoxSize(0, 0)

        if dimensions.is_landscape:
            cy = _round_half_up(box.cx * dimensions.height / dimensions.width)
            return BoxSize(box.cx, cy)

        cx = _round_half_up(box.cy * dimensions.width / dimensions.height)
        return BoxSize(cx, box.cy)

    def resize(self, box: BoxSize, payload: str) -> BoxSize:
        """Probe the payload and fit it into ``box``."""
        return self.fit(box, self.prober(payload))

    def apply(self, drawing: Drawing, payload: str) -> Optional[BoxSize]:
        """
        Resize a drawing in place.

        The new extents are written to both the anchor's ``wp:extent`` and the
        picture's ``a:ext`` so the two never diverge.

        Args:
            drawing: Drawing to resize
            payload: Substitution payload of the drawing

        Returns:
            The applied extents, or None if the drawing declares no extents
        """
        picture = drawing.picture
        anchor = drawing.anchor
        box = picture.shape_extent if picture is not None else None
        if box is None and anchor is not None:
            box = anchor.extent
        if box is None:
            logger.warning("Contained drawing declares no extents, skipping resize")
            return None

        new_box = self.resize(box, payload)
        if anchor is not None:
            anchor.set_extent(new_box)
        if picture is not None:
            picture.set_shape_extent(new_box)

        logger.debug(f"Resized contained image {box.cx}x{box.cy} -> {new_box.cx}x{new_box.cy}")
        return new_box
