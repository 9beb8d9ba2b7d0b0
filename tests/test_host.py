from __future__ import annotations

import logging

from iris_i18n.host import LoggingSink, TextDocument
from iris_i18n.planner import Selection, plan_text
from iris_i18n.utils import configure_logging


def test_position_and_offset_mapping(tmp_path):
    doc = TextDocument(tmp_path / "a.go", "ab\ncd\n\nef")
    assert doc.position_at(0) == (0, 0)
    assert doc.position_at(4) == (1, 1)
    assert doc.position_at(7) == (3, 0)
    assert doc.position_at(100) == (3, 2)
    assert doc.offset_at(1, 1) == 4
    assert doc.offset_at(3, 5) == len(doc.text)


def test_document_path_is_resolved(tmp_path):
    doc = TextDocument(tmp_path / "x" / ".." / "a.go", "")
    assert doc.path == (tmp_path / "a.go").resolve()


def test_from_file_reads_text(tmp_path):
    source = tmp_path / "main.go"
    source.write_text('ctx.Tr("greet")', encoding="utf-8")
    doc = TextDocument.from_file(source, "go")
    assert doc.text == 'ctx.Tr("greet")'
    assert doc.language_id == "go"


def test_logging_sink_reports_positions(tmp_path):
    records: list[logging.LogRecord] = []

    class Collect(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    configure_logging("INFO", Collect())
    try:
        doc = TextDocument(tmp_path / "a.go", 'x\nctx.Tr("greet") ctx.Tr("bye")')
        result = plan_text(
            doc.text, {"en": {"greet": "Hi"}}, "en", Selection.at(doc.offset_at(1, 9))
        )
        sink = LoggingSink()
        sink.set_hover_annotations(doc, result.hover)
        sink.set_inline_annotations(doc, result.inline)
    finally:
        configure_logging()
    messages = [record.getMessage() for record in records]
    assert any(":2:25 hover en: bye" in message for message in messages)
    assert any(":2:9 inline Hi" in message for message in messages)
