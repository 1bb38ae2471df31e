"""
Pytest configuration for image_keeper.
"""

import logging
import sys
from pathlib import Path

import pytest

from image_keeper.models.package import Package, Part
from tests.builders import ODT_CONTENT, png_bytes


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Temporary directory for tests."""
    return tmp_path


@pytest.fixture
def odt_package() -> Package:
    """ODT package with two described frames and one plain frame."""
    return Package(
        filename="report.odt",
        extension="odt",
        parts=[
            Part("mimetype", b"application/vnd.oasis.opendocument.text"),
            Part("content.xml", ODT_CONTENT),
            Part("Pictures/logo.png", png_bytes(2, 2)),
        ],
    )


@pytest.fixture
def landscape_png(tmp_path) -> Path:
    """800x400 PNG on disk."""
    path = tmp_path / "landscape.png"
    path.write_bytes(png_bytes(800, 400))
    return path


@pytest.fixture
def portrait_png(tmp_path) -> Path:
    """300x600 PNG on disk."""
    path = tmp_path / "portrait.png"
    path.write_bytes(png_bytes(300, 600))
    return path
