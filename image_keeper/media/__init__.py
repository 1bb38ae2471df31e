"""Image probing and media materialization."""

from .image_probe import ImageDimensions, probe_image, probe_payload
from .materializer import MediaMaterializer

__all__ = ["ImageDimensions", "probe_image", "probe_payload", "MediaMaterializer"]
