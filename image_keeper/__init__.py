"""
image_keeper - dynamic image substitution for office document templates.

Rewrites placeholder images of a rendered DOCX or ODT package so that they
point at runtime-supplied image data, keeping drawings, relationship tables
and media parts consistent:

- Empty-image cleaning for placeholders that received no payload
- Relation id allocation for placeholders repeated in one part
- Aspect-preserving sizing for "contained" images
- Flow-format (ODT) frame rewriting

Quick Start:
    from image_keeper import ImagePostprocessor, read_package, write_package

    package = read_package("rendered.docx")
    report = ImagePostprocessor().execute(package)
    write_package(package, "final.docx")
"""

from .version import __version__, __version_info__

from .exceptions import (
    ImageKeeperError,
    PackageError,
    ParsingError,
    InvalidExtentError,
    XMLParseError,
    RelationshipError,
    RelationNotFoundError,
    MediaNotFoundError,
    DuplicateRelationError,
    MediaError,
    DimensionProbeError,
    PayloadError,
)
from .models import Package, Part, SubstitutionState
from .parser import RelationshipResolver, read_package
from .export import write_package
from .engine import (
    ContainedImageResizer,
    EmptyImageCleaner,
    FlowImageSubstitution,
    ImageSubstitutionEngine,
)
from .postprocessor import ImagePostprocessor, ProcessingOptions, ProcessingReport

__all__ = [
    "__version__",
    "__version_info__",
    "ImageKeeperError",
    "PackageError",
    "ParsingError",
    "InvalidExtentError",
    "XMLParseError",
    "RelationshipError",
    "RelationNotFoundError",
    "MediaNotFoundError",
    "DuplicateRelationError",
    "MediaError",
    "DimensionProbeError",
    "PayloadError",
    "Package",
    "Part",
    "SubstitutionState",
    "RelationshipResolver",
    "read_package",
    "write_package",
    "ContainedImageResizer",
    "EmptyImageCleaner",
    "FlowImageSubstitution",
    "ImageSubstitutionEngine",
    "ImagePostprocessor",
    "ProcessingOptions",
    "ProcessingReport",
]
