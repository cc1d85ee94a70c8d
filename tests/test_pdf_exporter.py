import fitz  # PyMuPDF
import pytest

from inkmark.core.annotations import (
    AnnotationType,
    FreehandAnnotation,
    RegionAnnotation,
    TextAnnotation,
)
from inkmark.core.document import PDFExporter, derive_output_name
from inkmark.core.errors import ExportError


@pytest.fixture
def annotations():
    return [
        RegionAnnotation(AnnotationType.HIGHLIGHT, 1, "rgba(255, 255, 0, 0.4)", 20.0, 50, 50, 200, 80),
        FreehandAnnotation(1, "#ff0000", 2.0, [(10, 10), (60, 60), (110, 10)]),
        TextAnnotation(2, "#000000", 72, 100, "Hello Inkmark", 16.0),
        RegionAnnotation(AnnotationType.RECTANGLE, 2, "#3b82f6", 2.0, 300, 300, 400, 350),
    ]


class TestDeriveOutputName:

    def test_inserts_suffix(self):
        assert derive_output_name("report.pdf") == "report_annotated.pdf"

    def test_custom_suffix(self):
        assert derive_output_name("a.b.pdf", "_marked") == "a.b_marked.pdf"

    def test_missing_extension(self):
        assert derive_output_name("notes") == "notes_annotated.pdf"


class TestExportToBytes:

    def test_writes_text_and_drawings(self, pdf_bytes, annotations):
        data = PDFExporter().export_to_bytes(pdf_bytes, annotations)

        doc = fitz.open(stream=data, filetype="pdf")
        try:
            assert doc.page_count == 2
            assert "Hello Inkmark" in doc[1].get_text()
            page_one = doc[0].get_drawings()
            assert any(d.get("fill") for d in page_one)
            assert any(d.get("color") for d in page_one)
            assert doc[1].get_drawings()
        finally:
            doc.close()

    def test_text_lands_at_stored_position(self, pdf_bytes):
        text = TextAnnotation(1, "#000000", 72, 100, "Anchor", 16.0)
        data = PDFExporter().export_to_bytes(pdf_bytes, [text])

        doc = fitz.open(stream=data, filetype="pdf")
        try:
            (word,) = doc[0].get_text("words")[:1]
            x0, y0, x1, y1 = word[:4]
            assert x0 == pytest.approx(72, abs=2)
            # Baseline sits at y=100 measured from the top
            assert y0 < 100 < y1 + 4
        finally:
            doc.close()

    def test_no_annotations_still_round_trips(self, pdf_bytes):
        data = PDFExporter().export_to_bytes(pdf_bytes, [])
        doc = fitz.open(stream=data, filetype="pdf")
        assert doc.page_count == 2
        doc.close()

    def test_reports_progress(self, pdf_bytes, annotations):
        calls = []
        PDFExporter().export_to_bytes(pdf_bytes, annotations,
                                      lambda done, total: calls.append((done, total)))
        assert calls[-1] == (2, 2)

    def test_corrupt_source_raises(self, annotations):
        with pytest.raises(ExportError):
            PDFExporter().export_to_bytes(b"this is not a pdf", annotations)

    def test_annotations_are_not_modified(self, pdf_bytes, annotations):
        before = [ann.to_dict() for ann in annotations]
        PDFExporter().export_to_bytes(pdf_bytes, annotations)
        assert [ann.to_dict() for ann in annotations] == before


class TestExportToFile:

    def test_writes_output(self, pdf_path, tmp_path, annotations):
        output = tmp_path / "report_annotated.pdf"
        PDFExporter().export_to_file(str(pdf_path), str(output), annotations)
        assert output.read_bytes().startswith(b"%PDF")

    def test_missing_source(self, tmp_path, annotations):
        with pytest.raises(ExportError):
            PDFExporter().export_to_file(str(tmp_path / "missing.pdf"),
                                         str(tmp_path / "out.pdf"), annotations)


class TestRotatedPages:

    @pytest.fixture
    def rotated_pdf(self):
        doc = fitz.open()
        page = doc.new_page(width=612, height=792)
        page.set_rotation(90)
        data = doc.tobytes()
        doc.close()
        return data

    def test_highlight_lands_where_it_was_drawn(self, rotated_pdf):
        # Displayed page is 792 x 612 once /Rotate 90 is applied
        highlight = RegionAnnotation(AnnotationType.HIGHLIGHT, 1, "#ffff00", 20.0, 100, 50, 300, 150)
        data = PDFExporter().export_to_bytes(rotated_pdf, [highlight])

        doc = fitz.open(stream=data, filetype="pdf")
        try:
            pix = doc[0].get_pixmap(alpha=False)
            assert (pix.width, pix.height) == (792, 612)
            assert pix.pixel(200, 100)[2] < 230
            assert pix.pixel(200, 300) == (255, 255, 255)
            assert pix.pixel(690, 200) == (255, 255, 255)
        finally:
            doc.close()

    def test_freehand_segment_follows_rotation(self, rotated_pdf):
        stroke = FreehandAnnotation(1, "#000000", 6.0, [(400, 100), (600, 100)])
        data = PDFExporter().export_to_bytes(rotated_pdf, [stroke])

        doc = fitz.open(stream=data, filetype="pdf")
        try:
            pix = doc[0].get_pixmap(alpha=False)
            assert pix.pixel(500, 100)[0] < 100
            assert pix.pixel(100, 500) == (255, 255, 255)
        finally:
            doc.close()

    def test_text_is_written(self, rotated_pdf):
        text = TextAnnotation(1, "#000000", 100, 200, "Rotated", 16.0)
        data = PDFExporter().export_to_bytes(rotated_pdf, [text])

        doc = fitz.open(stream=data, filetype="pdf")
        try:
            assert "Rotated" in doc[0].get_text()
        finally:
            doc.close()
