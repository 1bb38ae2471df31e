"""Image cleaning, resizing and substitution engines."""

from .image_cleaner import EmptyImageCleaner
from .image_resizer import ContainedImageResizer
from .image_substitution import ImageSubstitutionEngine, SubstitutionResult
from .odt_images import FlowImageSubstitution

__all__ = [
    "EmptyImageCleaner",
    "ContainedImageResizer",
    "ImageSubstitutionEngine",
    "SubstitutionResult",
    "FlowImageSubstitution",
]
