from __future__ import annotations

from io import BytesIO

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt, RGBColor

from snapsolve.documents.traversal import ANSWER_LABEL, EXPLANATION_LABEL

_ANSWER_COLOR = RGBColor(0x1A, 0x7A, 0x1A)
_META_COLOR = RGBColor(0x80, 0x80, 0x80)


class WordSink:
    def __init__(self):
        self._document = Document()
        normal = self._document.styles["Normal"]
        normal.font.name = "Calibri"
        normal.font.size = Pt(11)

    def header(self, title: str, created_at: str, question_count: int) -> None:
        self._document.core_properties.title = title
        heading = self._document.add_heading(title, level=1)
        heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

        meta = self._document.add_paragraph()
        meta.alignment = WD_ALIGN_PARAGRAPH.CENTER
        run = meta.add_run(f"Created {created_at} · {question_count} question(s)")
        run.font.size = Pt(9)
        run.font.color.rgb = _META_COLOR

    def question(self, number: int, text: str) -> None:
        self._document.add_heading(f"Q{number}. {text}", level=3)

    def option(self, label: str, text: str) -> None:
        paragraph = self._document.add_paragraph(f"{label}. {text}")
        paragraph.paragraph_format.left_indent = Pt(20)
        paragraph.paragraph_format.space_after = Pt(2)

    def answer(self, text: str) -> None:
        paragraph = self._document.add_paragraph()
        label = paragraph.add_run(f"{ANSWER_LABEL} ")
        label.bold = True
        value = paragraph.add_run(text)
        value.font.color.rgb = _ANSWER_COLOR

    def explanation(self, text: str) -> None:
        paragraph = self._document.add_paragraph()
        paragraph.add_run(f"{EXPLANATION_LABEL} ").bold = True
        paragraph.add_run(text)

    def end_question(self) -> None:
        self._document.add_paragraph()

    def finish(self) -> bytes:
        buffer = BytesIO()
        self._document.save(buffer)
        return buffer.getvalue()
