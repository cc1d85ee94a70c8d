import pytest
from PyQt5.QtWidgets import QMessageBox

from inkmark.core.annotations import AnnotationType
from inkmark.ui import MainWindow
from inkmark.ui import main_window as main_window_module
from inkmark.ui.page_label import TextCaptureInput


@pytest.fixture
def window(qapp):
    w = MainWindow()
    yield w
    w.annotation_controller.annotation_manager.mark_saved()
    w.close()


class TestMainWindow:

    def test_starts_empty(self, window):
        assert window.status_text() == "No document"
        assert not window.download_button.isEnabled()

    def test_load_pdf(self, window, pdf_path):
        assert window.load_pdf(str(pdf_path))
        assert window.page_label.text() == "1 / 2"
        assert window.status_text() == "Tool: None"
        assert window.download_button.isEnabled()
        assert not window.prev_button.isEnabled()

    def test_load_failure_is_reported(self, window, tmp_path, monkeypatch):
        shown = []
        monkeypatch.setattr(main_window_module.QMessageBox, "critical",
                            lambda *args: shown.append(args))
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"nope")

        assert not window.load_pdf(str(bad))
        assert len(shown) == 1

    def test_navigation(self, window, pdf_path):
        window.load_pdf(str(pdf_path))
        window.next_page()
        assert window.current_page == 2
        assert window.annotation_controller.session.page == 2
        window.next_page()
        assert window.current_page == 2
        window.prev_page()
        assert window.current_page == 1

    def test_zoom_is_clamped(self, window, pdf_path):
        window.load_pdf(str(pdf_path))
        for _ in range(20):
            window.zoom_in()
        assert window.zoom == 3.0
        assert window.annotation_controller.session.scale == 3.0
        for _ in range(20):
            window.zoom_out()
        assert window.zoom == 0.5

    def test_rotate(self, window, pdf_path):
        window.load_pdf(str(pdf_path))
        window.rotate()
        assert window.rotation == 90
        assert window.page_canvas.width() == 792

    def test_status_shows_tool_and_unsaved_changes(self, window, pdf_path):
        window.load_pdf(str(pdf_path))
        controller = window.annotation_controller
        controller.select_tool(AnnotationType.HIGHLIGHT)
        controller.pointer_down(0, 0)
        controller.pointer_move(30, 30)
        controller.pointer_up()

        assert window.status_label.text() == "Tool: Highlight (Unsaved changes)"
        assert window.annotation_toolbar.buttons[AnnotationType.HIGHLIGHT].isChecked()

        assert window.save_annotations()
        assert window.status_text() == "Tool: Highlight"

    def test_close_with_unsaved_changes_can_cancel(self, window, pdf_path, monkeypatch):
        window.load_pdf(str(pdf_path))
        controller = window.annotation_controller
        controller.select_tool(AnnotationType.RECTANGLE)
        controller.pointer_down(0, 0)
        controller.pointer_move(30, 30)
        controller.pointer_up()

        monkeypatch.setattr(main_window_module.QMessageBox, "question",
                            lambda *args: QMessageBox.Cancel)
        window.close_pdf()
        assert window.pdf_reader.is_loaded()

        monkeypatch.setattr(main_window_module.QMessageBox, "question",
                            lambda *args: QMessageBox.Discard)
        window.close_pdf()
        assert not window.pdf_reader.is_loaded()
        assert window.status_text() == "No document"


class TestTextInputLifetime:

    def open_inputs(self, window):
        return [child for child in window.page_canvas.findChildren(TextCaptureInput)
                if not child.isHidden()]

    def test_close_removes_text_input(self, window, pdf_path):
        window.load_pdf(str(pdf_path))
        controller = window.annotation_controller
        controller.select_tool(AnnotationType.TEXT)
        controller.pointer_down(50, 50)

        (text_input,) = self.open_inputs(window)
        text_input.setText("typed text")

        window.close_pdf()
        assert self.open_inputs(window) == []

    def test_reopen_removes_text_input(self, window, pdf_path):
        window.load_pdf(str(pdf_path))
        controller = window.annotation_controller
        controller.select_tool(AnnotationType.TEXT)
        controller.pointer_down(50, 50)
        self.open_inputs(window)[0].setText("typed text")

        window.load_pdf(str(pdf_path))

        assert self.open_inputs(window) == []
        assert controller.annotation_manager.get_annotation_count() == 0

    def test_text_input_commits_while_document_open(self, window, pdf_path):
        window.load_pdf(str(pdf_path))
        controller = window.annotation_controller
        controller.select_tool(AnnotationType.TEXT)
        controller.pointer_down(50, 50)

        (text_input,) = self.open_inputs(window)
        text_input.setText("kept")
        text_input.returnPressed.emit()

        assert [ann.text for ann in controller.annotation_manager.annotations] == ["kept"]
        assert self.open_inputs(window) == []


class TestExportStatus:

    def test_page_progress_shown(self, window, pdf_path):
        window.load_pdf(str(pdf_path))
        window.annotation_controller.export_page_progress.emit(0, 2)
        assert window.status_label.text() == "Exporting: page 1 of 2"
