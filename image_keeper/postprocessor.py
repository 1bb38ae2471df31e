"""
Image postprocessor.

Runs after template rendering: selects the box-model (DOCX) or flow (ODT)
path for a package and each of its embeddings, cleans unreplaced
placeholders and substitutes dynamic images part by part.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging

from .engine.image_cleaner import EmptyImageCleaner
from .engine.image_resizer import ContainedImageResizer
from .engine.image_substitution import ImageSubstitutionEngine, SubstitutionResult
from .engine.odt_images import CONTENT_PART, FlowImageSubstitution
from .exceptions import ImageKeeperError, XMLParseError
from .media.materializer import MediaMaterializer
from .models.package import Package, Part

logger = logging.getLogger(__name__)

MAIN_DOCUMENT_PART = 'word/document.xml'


@dataclass(frozen=True)
class ProcessingOptions:
    """
    Options of the image postprocessor.

    Attributes:
        strict_parsing: Record unparsable parts as errors (otherwise skip them with a warning).
        fail_fast: Raise the first recorded error instead of continuing.
        scrub_payload_text: Replace leaked payload text with relation ids.
        include_inline: Treat ``wp:inline`` drawings like ``wp:anchor`` ones.
        materialize_media: Turn payload media entries into image bytes afterwards.
        qr_box_size: Pixels per QR module when materializing.
        qr_border: QR quiet zone in modules when materializing.
    """

    strict_parsing: bool = True
    fail_fast: bool = False
    scrub_payload_text: bool = True
    include_inline: bool = True
    materialize_media: bool = False
    qr_box_size: int = 10
    qr_border: int = 2


@dataclass
class ProcessingReport:
    """Summary of one postprocessor run."""

    parts: List[str] = field(default_factory=list)
    substituted: int = 0
    duplicated: int = 0
    cleaned: int = 0
    frames: int = 0
    materialized: int = 0
    skipped: List[str] = field(default_factory=list)
    errors: List[ImageKeeperError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, result: SubstitutionResult) -> None:
        self.substituted += result.substituted
        self.duplicated += result.duplicated
        self.errors.extend(result.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'parts': len(self.parts),
            'substituted': self.substituted,
            'duplicated': self.duplicated,
            'cleaned': self.cleaned,
            'frames': self.frames,
            'materialized': self.materialized,
            'skipped': len(self.skipped),
            'errors': len(self.errors),
        }


class ImagePostprocessor:
    """
    Dispatches image postprocessing by package format.

    Box-model packages are processed main document first, then headers, then
    footers, each part cleaned before substitution. Flow packages have a
    single content part.
    """

    def __init__(self, options: Optional[ProcessingOptions] = None,
                 resizer: Optional[ContainedImageResizer] = None):
        """
        Initialize postprocessor.

        Args:
            options: Processing options
            resizer: Resizer for contained images (defaults to Pillow probing)
        """
        self.options = options or ProcessingOptions()
        self.resizer = resizer or ContainedImageResizer()

    def execute(self, package: Package) -> ProcessingReport:
        """
        Process a package and all its embeddings in place.

        Args:
            package: Package to process

        Returns:
            ProcessingReport

        Raises:
            ImageKeeperError: First error encountered, when ``fail_fast`` is set
        """
        report = ProcessingReport()
        self._execute(package, report)

        if report.errors:
            logger.warning(f"Image postprocessing finished with {len(report.errors)} error(s)")
        return report

    def _execute(self, package: Package, report: ProcessingReport) -> None:
        if package.extension == 'docx':
            self._process_docx(package, report)
        elif package.extension == 'odt':
            self._process_odt(package, report)
        else:
            logger.debug(f"No image postprocessing for '{package.extension}' packages")

        if self.options.materialize_media:
            materializer = MediaMaterializer(
                self.options.qr_box_size, self.options.qr_border, fail_fast=self.options.fail_fast
            )
            try:
                report.materialized += materializer.materialize(package)
            except ImageKeeperError as e:
                self._record(report, package.filename, e)
            report.errors.extend(materializer.errors)

        for embedding in package.embeddings:
            self._execute(embedding, report)

    def document_parts(self, package: Package) -> List[Part]:
        """Box-model parts that may hold images, in processing order."""
        main = package.get(MAIN_DOCUMENT_PART)
        parts = [main] if main is not None else []
        parts += package.parts_with_prefix('word/header')
        parts += package.parts_with_prefix('word/footer')
        return parts

    def _process_docx(self, package: Package, report: ProcessingReport) -> None:
        if package.get(MAIN_DOCUMENT_PART) is None:
            logger.warning(f"{package.filename or 'package'} has no {MAIN_DOCUMENT_PART}")

        cleaner = EmptyImageCleaner(self.options.include_inline)
        engine = ImageSubstitutionEngine(
            package,
            resizer=self.resizer,
            include_inline=self.options.include_inline,
            scrub_payload_text=self.options.scrub_payload_text,
        )

        for part in self.document_parts(package):
            try:
                cleaner.clean(part)
                result = engine.process_part(part)
            except XMLParseError as e:
                self._parse_failure(report, part, e)
                continue

            report.parts.append(part.name)
            report.add(result)
            if result.errors and self.options.fail_fast:
                raise result.errors[0]

        report.cleaned += cleaner.cleaned

    def _process_odt(self, package: Package, report: ProcessingReport) -> None:
        part = package.get(CONTENT_PART)
        if part is None:
            logger.warning(f"{package.filename or 'package'} has no {CONTENT_PART}")
            return

        try:
            report.frames += FlowImageSubstitution().process_part(part)
        except XMLParseError as e:
            self._parse_failure(report, part, e)
            return
        report.parts.append(part.name)

    def _parse_failure(self, report: ProcessingReport, part: Part, error: XMLParseError) -> None:
        if self.options.strict_parsing:
            self._record(report, part.name, error)
        else:
            logger.warning(f"Skipping unparsable part {part.name}: {error}")
            report.skipped.append(part.name)

    def _record(self, report: ProcessingReport, name: str, error: ImageKeeperError) -> None:
        logger.error(f"Image postprocessing failed for {name}: {error}")
        report.errors.append(error)
        if self.options.fail_fast:
            raise error
