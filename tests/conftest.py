"""
Shared fixtures. Qt runs on the offscreen platform so tests need no display.
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import fitz  # PyMuPDF
import pytest
from PyQt5.QtWidgets import QApplication

from inkmark.core.annotations import AnnotationManager, AnnotationPersistence


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_user_dirs(tmp_path, monkeypatch):
    """Keep snapshots and settings out of the real home directory."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))


@pytest.fixture
def manager():
    m = AnnotationManager()
    m.set_document("report.pdf", 3)
    return m


@pytest.fixture
def persistence(tmp_path):
    return AnnotationPersistence(tmp_path / "annotations")


def make_pdf_bytes(pages=2, width=612, height=792):
    """Build a throwaway PDF with blank pages."""
    doc = fitz.open()
    for _ in range(pages):
        doc.new_page(width=width, height=height)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def pdf_bytes():
    return make_pdf_bytes()


@pytest.fixture
def pdf_path(tmp_path, pdf_bytes):
    path = tmp_path / "report.pdf"
    path.write_bytes(pdf_bytes)
    return path


@pytest.fixture
def pdf_factory():
    return make_pdf_bytes
