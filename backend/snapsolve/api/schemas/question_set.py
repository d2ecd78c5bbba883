from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from snapsolve.domain.models import Question, QuestionSet


class QuestionResponse(BaseModel):
    id: str | None = None
    questionText: str
    questionType: str
    options: list[str] = Field(default_factory=list)
    answer: str | None = None
    explanation: str | None = None

    @classmethod
    def from_domain(cls, question: Question) -> QuestionResponse:
        return cls(
            id=question.id,
            questionText=question.text,
            questionType=question.type.value,
            options=list(question.options),
            answer=question.answer,
            explanation=question.explanation,
        )


class QuestionSetResponse(BaseModel):
    id: str
    title: str
    createdAt: datetime
    questionCount: int = 0
    questions: list[QuestionResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, question_set: QuestionSet) -> QuestionSetResponse:
        return cls(
            id=question_set.id,
            title=question_set.title,
            createdAt=question_set.created_at,
            questionCount=question_set.question_count,
            questions=[QuestionResponse.from_domain(item) for item in question_set.questions],
        )


class QuestionSetDeleteResponse(BaseModel):
    ok: bool = True
    id: str
