from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from snapsolve.core.errors import QuestionSetNotFoundError, TransportError
from snapsolve.documents import FORMATS, render_document
from snapsolve.domain.models import QuestionSet
from snapsolve.infra.ports.llm import VisionLLMPort
from snapsolve.pipeline.assembler import PASTED_IMAGE_TITLE, assemble, upload_title
from snapsolve.pipeline.normalizer import NormalizedImage, normalize_base64, normalize_upload
from snapsolve.pipeline.parser import parse_questions
from snapsolve.pipeline.prompt import EXTRACTION_PROMPT, SYSTEM_PROMPT

logger = logging.getLogger(__name__)

EXPORT_FILENAME_PREFIX = "mcq-results-"


class QuestionSetStorePort(Protocol):
    def save(self, question_set: QuestionSet) -> QuestionSet:
        ...

    def get(self, set_id: str) -> QuestionSet | None:
        ...


class ExtractionService:
    """Image in, persisted question set out."""

    def __init__(self, *, llm: VisionLLMPort, store: QuestionSetStorePort, model: str | None = None):
        self.llm = llm
        self.store = store
        self.model = model

    def process_upload(self, *, filename: str | None, content_type: str | None, payload: bytes) -> QuestionSet:
        image = normalize_upload(payload, content_type)
        logger.info("Processing upload %r (%s, %d bytes)", filename, image.media_type, image.size)
        return self._extract(image, upload_title(filename))

    def process_pasted_image(self, base64_image: str | None) -> QuestionSet:
        image = normalize_base64(base64_image)
        logger.info("Processing pasted image (%s, %d bytes)", image.media_type, image.size)
        return self._extract(image, PASTED_IMAGE_TITLE)

    def _extract(self, image: NormalizedImage, title: str) -> QuestionSet:
        try:
            raw_text = self.llm.generate_text_from_media(
                prompt=EXTRACTION_PROMPT,
                media_bytes=image.data,
                media_mime_type=image.media_type,
                system_prompt=SYSTEM_PROMPT,
                model=self.model,
            )
        except TransportError as exc:
            logger.warning("Extraction via %s failed: %s", self.llm.provider_name, exc)
            raise

        questions = parse_questions(raw_text)
        question_set = assemble(title, questions)
        self.store.save(question_set)
        logger.info("Saved question set %s with %d question(s)", question_set.id, question_set.question_count)
        return question_set


@dataclass(frozen=True)
class ExportedDocument:
    filename: str
    media_type: str
    content: bytes


class DocumentExportService:
    def __init__(self, *, store: QuestionSetStorePort):
        self.store = store

    def export(self, set_id: str, fmt: str) -> ExportedDocument:
        document_format = FORMATS.get(fmt)
        if document_format is None:
            raise ValueError(f"Unsupported document format: {fmt}")

        question_set = self.store.get(set_id)
        if question_set is None:
            raise QuestionSetNotFoundError(set_id)

        content = render_document(question_set, document_format)
        return ExportedDocument(
            filename=f"{EXPORT_FILENAME_PREFIX}{question_set.id}.{document_format.extension}",
            media_type=document_format.media_type,
            content=content,
        )
