"""Render a question set to PDF or Word bytes."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from snapsolve.core.errors import RenderingFailedError
from snapsolve.documents.pdf import PdfSink
from snapsolve.documents.traversal import DocumentSink, render_with
from snapsolve.documents.word import WordSink
from snapsolve.domain.models import QuestionSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentFormat:
    key: str
    extension: str
    media_type: str


PDF = DocumentFormat(key="pdf", extension="pdf", media_type="application/pdf")
WORD = DocumentFormat(
    key="word",
    extension="docx",
    media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)
FORMATS = {fmt.key: fmt for fmt in (PDF, WORD)}

_SINKS = {
    PDF.key: PdfSink,
    WORD.key: WordSink,
}


def render_document(question_set: QuestionSet, fmt: DocumentFormat | str) -> bytes:
    key = fmt if isinstance(fmt, str) else fmt.key
    sink_factory = _SINKS.get(key)
    if sink_factory is None:
        raise ValueError(f"Unsupported document format: {key}")

    try:
        sink: DocumentSink = sink_factory()
        return render_with(question_set, sink)
    except Exception as exc:
        logger.exception("Error generating %s for question set %s", key, question_set.id)
        raise RenderingFailedError(f"Failed to render {key} document: {exc}") from exc


def render_pdf(question_set: QuestionSet) -> bytes:
    return render_document(question_set, PDF)


def render_word(question_set: QuestionSet) -> bytes:
    return render_document(question_set, WORD)


__all__ = [
    "FORMATS",
    "PDF",
    "WORD",
    "DocumentFormat",
    "render_document",
    "render_pdf",
    "render_word",
]
