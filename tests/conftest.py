from __future__ import annotations

import logging

import pytest

from xlgrid.container import new_document
from xlgrid.core.model import Document
from xlgrid.writer import WorksheetWriter


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers to avoid pytest warnings."""
    config.addinivalue_line(
        "markers", "container: reads or writes .xlsx files through openpyxl."
    )


@pytest.fixture
def document() -> Document:
    """Blank document with a single ``Sheet1``."""
    return new_document()


@pytest.fixture
def writer(document: Document) -> WorksheetWriter:
    """Writer bound to ``Sheet1`` of the blank document."""
    return WorksheetWriter(document, "Sheet1")


@pytest.fixture
def debug_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Capture xlgrid logs down to DEBUG."""
    caplog.set_level(logging.DEBUG, logger="xlgrid")
    return caplog
