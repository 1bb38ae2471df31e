"""
Package model for office documents.

A Package is an ordered, mutable collection of named parts plus any nested
packages (embeddings) it carries.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union
import logging
import posixpath

logger = logging.getLogger(__name__)

PartData = Union[str, bytes]


@dataclass
class Part:
    """One named member of a package (XML text, media bytes or a payload string)."""

    name: str
    data: PartData = b""

    @property
    def extension(self) -> str:
        """Lower-case file extension without the dot."""
        return posixpath.splitext(self.name)[1].lower().lstrip('.')


@dataclass
class Package:
    """
    In-memory document package.

    Parts keep their load order; new parts are only ever appended.
    """

    filename: str = ""
    extension: str = "docx"
    parts: List[Part] = field(default_factory=list)
    embeddings: List["Package"] = field(default_factory=list)

    def __iter__(self) -> Iterator[Part]:
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def get(self, name: str) -> Optional[Part]:
        """
        Get a part by exact name.

        Args:
            name: Part name (e.g. ``word/document.xml``)

        Returns:
            Part or None if not found
        """
        for part in self.parts:
            if part.name == name:
                return part
        return None

    def add(self, part: Part) -> Part:
        """
        Append a new part.

        Raises:
            ValueError: If a part with the same name already exists
        """
        if part.name in self:
            raise ValueError(f"Part already exists: {part.name}")
        self.parts.append(part)
        logger.debug(f"Added part {part.name}")
        return part

    def parts_with_prefix(self, prefix: str, suffix: str = ".xml") -> List[Part]:
        """Parts whose name starts with ``prefix`` and ends with ``suffix``, in package order."""
        return [
            part for part in self.parts
            if part.name.startswith(prefix) and part.name.endswith(suffix)
        ]
