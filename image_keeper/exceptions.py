"""Custom exceptions for image_keeper."""

from typing import Optional


class ImageKeeperError(Exception):
    """Base exception for image_keeper errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class PackageError(ImageKeeperError):
    """Exception raised while loading or saving a document package."""

    pass


class ParsingError(ImageKeeperError):
    """Exception raised during part parsing."""

    pass


class XMLParseError(ParsingError):
    """A part's text is not well-formed XML."""

    def __init__(self, part_name: str, details: Optional[str] = None):
        super().__init__(f"Cannot parse part '{part_name}'", details)
        self.part_name = part_name


class InvalidExtentError(ParsingError):
    """A drawing extent attribute is not an integer EMU value."""

    pass


class RelationshipError(ImageKeeperError):
    """Exception raised when the relationship graph is inconsistent."""

    pass


class RelationNotFoundError(RelationshipError):
    """A blip references a relation id missing from its relationship table."""

    def __init__(self, relation_id: str, table_name: Optional[str] = None):
        super().__init__(
            f"Relation '{relation_id}' not found",
            f"table {table_name}" if table_name else None,
        )
        self.relation_id = relation_id
        self.table_name = table_name


class MediaNotFoundError(RelationshipError):
    """No package part matches a relationship target."""

    def __init__(self, target: str, relation_id: Optional[str] = None):
        super().__init__(
            f"Media '{target}' not found in package",
            f"relation {relation_id}" if relation_id else None,
        )
        self.target = target
        self.relation_id = relation_id


class DuplicateRelationError(RelationshipError):
    """A synthesized relation id or media name collides with an existing one."""

    pass


class MediaError(ImageKeeperError):
    """Exception raised during media processing."""

    pass


class DimensionProbeError(MediaError):
    """Image dimensions could not be determined."""

    pass


class PayloadError(MediaError):
    """A substitution payload could not be turned into image bytes."""

    pass
