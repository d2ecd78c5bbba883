"""Shared walk over a question set that every output format renders from.

The traversal fixes what is rendered and in which order: a document header,
then for each question its heading, its lettered options (multiple choice
only), the answer and the explanation. Format modules only decide how each
piece looks by implementing :class:`DocumentSink`.
"""

from __future__ import annotations

from datetime import datetime
from string import ascii_uppercase
from typing import Protocol

from snapsolve.domain.models import QuestionSet

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"
ANSWER_LABEL = "Answer:"
EXPLANATION_LABEL = "Explanation:"


class DocumentSink(Protocol):
    def header(self, title: str, created_at: str, question_count: int) -> None:
        ...

    def question(self, number: int, text: str) -> None:
        ...

    def option(self, label: str, text: str) -> None:
        ...

    def answer(self, text: str) -> None:
        ...

    def explanation(self, text: str) -> None:
        ...

    def end_question(self) -> None:
        ...

    def finish(self) -> bytes:
        ...


def option_label(index: int) -> str:
    if index < len(ascii_uppercase):
        return ascii_uppercase[index]
    return str(index + 1)


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def render_with(question_set: QuestionSet, sink: DocumentSink) -> bytes:
    sink.header(question_set.title, format_timestamp(question_set.created_at), question_set.question_count)

    for number, question in enumerate(question_set.questions, start=1):
        sink.question(number, question.text)
        if question.is_multiple_choice:
            for idx, text in enumerate(question.options):
                sink.option(option_label(idx), text)
        if question.answer:
            sink.answer(question.answer)
        if question.explanation:
            sink.explanation(question.explanation)
        sink.end_question()

    return sink.finish()
