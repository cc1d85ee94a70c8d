from inkmark.core.annotations import TextAnnotation
from inkmark.core.export import ExportWorker


def run_worker(worker):
    """Run the export synchronously and collect what it signalled."""
    results, messages = [], []
    worker.export_finished.connect(lambda ok, msg: results.append((ok, msg)))
    worker.progress.connect(messages.append)
    worker.run()
    return results, messages


class TestExportWorker:

    def test_writes_output(self, qapp, pdf_bytes, tmp_path):
        output = tmp_path / "report_annotated.pdf"
        worker = ExportWorker(pdf_bytes, str(output),
                              [TextAnnotation(1, "#000000", 72, 72, "Hi", 16.0)])

        results, messages = run_worker(worker)

        assert results == [(True, "Annotated PDF saved successfully!")]
        assert messages
        assert output.read_bytes().startswith(b"%PDF")
        # Only the final file is left behind
        assert [p.name for p in tmp_path.iterdir()] == ["report_annotated.pdf"]

    def test_failure_reports_and_cleans_up(self, qapp, tmp_path):
        output = tmp_path / "out.pdf"
        worker = ExportWorker(b"not a pdf", str(output), [])

        results, _ = run_worker(worker)

        assert len(results) == 1
        assert results[0][0] is False
        assert not output.exists()
        assert list(tmp_path.iterdir()) == []

    def test_unwritable_destination(self, qapp, pdf_bytes, tmp_path):
        output = tmp_path / "missing-dir" / "out.pdf"
        results, _ = run_worker(ExportWorker(pdf_bytes, str(output), []))
        assert results[0][0] is False
