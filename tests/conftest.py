"""
Pytest configuration for HtmlQuill
"""

import io
import logging
import sys
from pathlib import Path

import pytest
from PIL import Image

from htmlquill.media.resource_loader import MappingResourceLoader


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests; undo what the CLI's setup_logging installs."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()
    package_logger = logging.getLogger("htmlquill")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


def make_image_bytes(width: int = 40, height: int = 20, image_format: str = "PNG") -> bytes:
    """Encode a solid image of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def make_image():
    """Factory fixture: ``make_image(width, height, format)`` -> encoded bytes."""
    return make_image_bytes


@pytest.fixture
def png_bytes():
    """A 40x20 PNG."""
    return make_image_bytes(40, 20)


@pytest.fixture
def image_loader(png_bytes):
    """In-memory loader serving a 40x20 PNG under a few URIs."""
    return MappingResourceLoader(
        {
            "https://example.com/img/a.png": png_bytes,
            "https://example.com/img/b.png": make_image_bytes(10, 10),
            "https://example.com/broken.png": b"definitely not an image",
        }
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
