from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

MAX_QUESTION_TEXT_LENGTH = 1000
MAX_ANSWER_LENGTH = 65535
MAX_EXPLANATION_LENGTH = 2000


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    GENERAL = "GENERAL"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Question:
    text: str
    type: QuestionType = QuestionType.GENERAL
    options: list[str] = field(default_factory=list)
    answer: str | None = None
    explanation: str | None = None
    id: str | None = None
    question_set: QuestionSet | None = field(default=None, repr=False, compare=False)

    @property
    def is_multiple_choice(self) -> bool:
        return self.type is QuestionType.MULTIPLE_CHOICE


@dataclass(eq=False)
class QuestionSet:
    """Aggregate root: owns its questions, which are never reachable on their own."""

    id: str
    title: str
    created_at: datetime = field(default_factory=_utcnow)
    questions: list[Question] = field(default_factory=list)

    def __post_init__(self) -> None:
        owned, self.questions = self.questions, []
        for question in owned:
            self.add_question(question)

    def __setattr__(self, name: str, value) -> None:
        if name == "created_at" and "created_at" in self.__dict__:
            raise AttributeError("created_at is immutable once the set exists")
        super().__setattr__(name, value)

    def add_question(self, question: Question) -> None:
        if question.question_set is not None and question.question_set is not self:
            raise ValueError("Question already belongs to another question set")
        if any(item is question for item in self.questions):
            return
        self.questions.append(question)
        question.question_set = self

    def remove_question(self, question: Question) -> None:
        for idx, item in enumerate(self.questions):
            if item is question:
                del self.questions[idx]
                question.question_set = None
                return
        raise ValueError("Question does not belong to this question set")

    @property
    def question_count(self) -> int:
        return len(self.questions)
