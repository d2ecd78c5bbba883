from __future__ import annotations

from functools import lru_cache
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, StyleSheet1, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from snapsolve.documents.traversal import ANSWER_LABEL, EXPLANATION_LABEL

# CID fonts cover Hangul, CJK punctuation, Greek and math symbols as well as Latin;
# the built-in Type 1 fonts stop at Latin-1.
BODY_FONT = "HYSMyeongJo-Medium"
HEADING_FONT = "HYGothic-Medium"


@lru_cache(maxsize=1)
def register_fonts() -> str:
    for name in (BODY_FONT, HEADING_FONT):
        pdfmetrics.registerFont(UnicodeCIDFont(name))
    # `<b>` inside a Paragraph resolves through the family mapping.
    pdfmetrics.registerFontFamily(
        BODY_FONT,
        normal=BODY_FONT,
        bold=HEADING_FONT,
        italic=BODY_FONT,
        boldItalic=HEADING_FONT,
    )
    return BODY_FONT


def escape_markup(text: str) -> str:
    """Escape text for a ReportLab Paragraph and keep the model's line breaks."""
    if not text:
        return ""
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return text.replace("\n", "<br/>")


def get_styles() -> StyleSheet1:
    register_fonts()
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="SetTitle",
        parent=styles["Heading1"],
        fontSize=16,
        alignment=TA_CENTER,
        spaceAfter=4,
        fontName=HEADING_FONT,
    ))
    styles.add(ParagraphStyle(
        name="SetMeta",
        parent=styles["Normal"],
        fontName=BODY_FONT,
        fontSize=9,
        textColor=colors.grey,
        alignment=TA_CENTER,
        spaceAfter=12,
    ))
    styles.add(ParagraphStyle(
        name="QuestionHeading",
        parent=styles["Heading3"],
        fontSize=12,
        leading=15,
        alignment=TA_LEFT,
        spaceBefore=10,
        spaceAfter=6,
        fontName=HEADING_FONT,
    ))
    styles.add(ParagraphStyle(
        name="Option",
        parent=styles["Normal"],
        fontName=BODY_FONT,
        fontSize=10,
        leftIndent=20,
        spaceAfter=3,
    ))
    styles.add(ParagraphStyle(
        name="Answer",
        parent=styles["Normal"],
        fontName=BODY_FONT,
        fontSize=10,
        leading=13,
        spaceBefore=4,
        spaceAfter=3,
        textColor=colors.HexColor("#1a7a1a"),
    ))
    styles.add(ParagraphStyle(
        name="Explanation",
        parent=styles["Normal"],
        fontName=BODY_FONT,
        fontSize=10,
        leading=13,
        spaceAfter=3,
    ))
    return styles


class PdfSink:
    def __init__(self):
        self._buffer = BytesIO()
        self._styles = get_styles()
        self._story: list = []
        self._block: list = []
        self._title = ""

    def header(self, title: str, created_at: str, question_count: int) -> None:
        self._title = title
        self._story.append(Paragraph(escape_markup(title), self._styles["SetTitle"]))
        self._story.append(Paragraph(
            escape_markup(f"Created {created_at} · {question_count} question(s)"),
            self._styles["SetMeta"],
        ))

    def question(self, number: int, text: str) -> None:
        self._block = [Paragraph(f"Q{number}. {escape_markup(text)}", self._styles["QuestionHeading"])]

    def option(self, label: str, text: str) -> None:
        self._block.append(Paragraph(f"{label}. {escape_markup(text)}", self._styles["Option"]))

    def answer(self, text: str) -> None:
        self._block.append(Paragraph(f"<b>{ANSWER_LABEL}</b> {escape_markup(text)}", self._styles["Answer"]))

    def explanation(self, text: str) -> None:
        self._block.append(
            Paragraph(f"<b>{EXPLANATION_LABEL}</b> {escape_markup(text)}", self._styles["Explanation"])
        )

    def end_question(self) -> None:
        self._story.append(KeepTogether(self._block))
        self._story.append(Spacer(1, 0.3 * cm))
        self._block = []

    def finish(self) -> bytes:
        doc = SimpleDocTemplate(
            self._buffer,
            pagesize=A4,
            rightMargin=2 * cm,
            leftMargin=2 * cm,
            topMargin=2 * cm,
            bottomMargin=2 * cm,
            title=self._title,
        )
        doc.build(self._story)
        return self._buffer.getvalue()
