"""
Pytest configuration for quillpress
"""

import pytest
import logging
import sys
from pathlib import Path

from quillpress.config import ConversionOptions
from quillpress.engine.geometry import PageGeometry

from .builders import make_docx, make_epub, make_pptx, make_xlsx, png_bytes, text_shape, w_paragraph


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    # Clear all existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # Set up console-only logging for tests
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)  # Only show warnings and errors during tests

    formatter = logging.Formatter(
        '%(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    # Cleanup after test
    root_logger.handlers.clear()


@pytest.fixture(autouse=True)
def no_env_font(monkeypatch):
    """Keep a developer's QUILLPRESS_FONT from leaking into tests."""
    monkeypatch.delenv("QUILLPRESS_FONT", raising=False)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def png():
    """Small opaque PNG image."""
    return png_bytes()


@pytest.fixture
def portrait_geometry():
    return PageGeometry(width=595.0, height=842.0, margin=72.0)


@pytest.fixture
def landscape_geometry():
    return PageGeometry(width=842.0, height=595.0, margin=40.0)


@pytest.fixture
def docx_options():
    return ConversionOptions.for_format("docx")


@pytest.fixture
def simple_xlsx():
    """One worksheet holding a 2x2 grid."""
    return make_xlsx([[["A", "B"], ["1", "2"]]])


@pytest.fixture
def simple_pptx():
    """Two slides with a title each."""
    return make_pptx(
        [
            [_title("First slide")],
            [_title("Second slide")],
        ]
    )


@pytest.fixture
def simple_docx():
    return make_docx(w_paragraph("Document title", style="Title") + w_paragraph("Body text"))


@pytest.fixture
def simple_epub():
    return make_epub(["<h1>Chapter One</h1><p>First words.</p>", "<p>Second chapter.</p>"])


def _title(text):
    return text_shape(text, x=457200, y=274638)


# Configure pytest to ignore logging errors
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    # Ignore logging errors during tests
    logging.raiseExceptions = False
