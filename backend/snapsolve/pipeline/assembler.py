from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from snapsolve.core.errors import NoQuestionsExtractedError
from snapsolve.domain.models import Question, QuestionSet
from snapsolve.utils.ids import new_public_id

logger = logging.getLogger(__name__)

UPLOAD_TITLE_PREFIX = "Uploaded Image: "
PASTED_IMAGE_TITLE = "Pasted Image"


def upload_title(filename: str | None) -> str:
    name = (filename or "").strip()
    return f"{UPLOAD_TITLE_PREFIX}{name or 'Unnamed'}"


def assemble(title: str, questions: Sequence[Question], *, now: datetime | None = None) -> QuestionSet:
    """Wrap parsed questions into a new set; an empty extraction is an error, never an empty set."""
    if not questions:
        logger.warning("No questions extracted for %r", title)
        raise NoQuestionsExtractedError("No questions could be extracted from the image")

    question_set = QuestionSet(
        id=new_public_id("qs_"),
        title=title,
        created_at=now or datetime.now(timezone.utc),
    )
    for question in questions:
        question_set.add_question(question)
    return question_set
