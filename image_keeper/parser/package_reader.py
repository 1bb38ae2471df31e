"""
Package reader for DOCX/ODT files.

Loads a zip container into an in-memory Package. XML parts are decoded to
text, other members are kept as bytes, and nested office documents become
embeddings.
"""

from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Union
import logging
import posixpath
import zipfile

from ..exceptions import PackageError
from ..models.package import Package, Part

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = ('xml', 'rels')
EMBEDDED_EXTENSIONS = ('docx', 'odt')


def _extension(name: str) -> str:
    return posixpath.splitext(name)[1].lower().lstrip('.')


def read_package(source: Union[str, Path, bytes, BinaryIO], filename: str = "") -> Package:
    """
    Read a document package.

    Args:
        source: Path to the file, raw zip bytes or a binary stream
        filename: Name recorded on the package (defaults to the path name)

    Returns:
        Package

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist
        PackageError: If the source is not a valid zip container
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Package file not found: {path}")
        filename = filename or path.name
        stream: Union[Path, BinaryIO] = path
    elif isinstance(source, bytes):
        stream = BytesIO(source)
    else:
        stream = source

    package = Package(filename=filename, extension=_extension(filename) or "docx")
    try:
        with zipfile.ZipFile(stream, 'r') as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                _load_member(package, info.filename, zf.read(info.filename))
    except zipfile.BadZipFile as e:
        raise PackageError("Not a valid package", f"{filename or '<stream>'}: {e}") from e

    logger.info(
        f"Read package {filename or '<stream>'}: {len(package)} part(s), "
        f"{len(package.embeddings)} embedding(s)"
    )
    return package


def _load_member(package: Package, name: str, data: bytes) -> None:
    ext = _extension(name)
    if ext in EMBEDDED_EXTENSIONS:
        try:
            package.embeddings.append(read_package(data, filename=name))
            return
        except PackageError as e:
            logger.warning(f"Keeping unreadable embedding {name} as binary: {e}")
    elif ext in TEXT_EXTENSIONS:
        try:
            package.parts.append(Part(name, data.decode('utf-8')))
            return
        except UnicodeDecodeError:
            logger.warning(f"Part {name} is not UTF-8, keeping it as binary")

    package.parts.append(Part(name, data))
