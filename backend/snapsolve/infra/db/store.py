from __future__ import annotations

from datetime import timezone

from sqlalchemy import desc, select
from sqlalchemy.orm import Session, selectinload, sessionmaker

from snapsolve.domain.models import Question, QuestionSet, QuestionType
from snapsolve.infra.db.models import QuestionRow, QuestionSetRow
from snapsolve.infra.db.session import get_session_factory
from snapsolve.utils.ids import new_public_id


class QuestionSetStore:
    """Persists question sets as a unit; questions are only reachable through their set."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory or get_session_factory()

    @staticmethod
    def _to_question(row: QuestionRow) -> Question:
        try:
            question_type = QuestionType(row.question_type)
        except ValueError:
            question_type = QuestionType.GENERAL
        return Question(
            id=row.public_id,
            text=row.question_text,
            type=question_type,
            options=[str(item) for item in (row.options_json or [])],
            answer=row.answer,
            explanation=row.explanation,
        )

    @classmethod
    def _to_question_set(cls, row: QuestionSetRow) -> QuestionSet:
        created_at = row.created_at
        if created_at.tzinfo is None:
            # SQLite drops the offset; everything is stored in UTC.
            created_at = created_at.replace(tzinfo=timezone.utc)
        return QuestionSet(
            id=row.public_id,
            title=row.title,
            created_at=created_at,
            questions=[cls._to_question(item) for item in row.questions],
        )

    def save(self, question_set: QuestionSet) -> QuestionSet:
        if not question_set.questions:
            raise ValueError("Refusing to persist an empty question set")

        with self._session_factory() as db:
            set_row = QuestionSetRow(
                public_id=question_set.id,
                title=question_set.title,
                created_at=question_set.created_at.astimezone(timezone.utc),
            )
            for idx, question in enumerate(question_set.questions):
                if question.id is None:
                    question.id = new_public_id("q_")
                set_row.questions.append(
                    QuestionRow(
                        public_id=question.id,
                        order_index=idx,
                        question_text=question.text,
                        question_type=question.type.value,
                        options_json=list(question.options),
                        answer=question.answer,
                        explanation=question.explanation,
                    )
                )
            db.add(set_row)
            db.commit()
        return question_set

    def _load(self, db: Session, set_id: str) -> QuestionSetRow | None:
        stmt = (
            select(QuestionSetRow)
            .options(selectinload(QuestionSetRow.questions))
            .where(QuestionSetRow.public_id == set_id)
        )
        return db.execute(stmt).scalar_one_or_none()

    def get(self, set_id: str) -> QuestionSet | None:
        with self._session_factory() as db:
            row = self._load(db, set_id)
            if row is None:
                return None
            return self._to_question_set(row)

    def list_newest_first(self, *, limit: int | None = None, offset: int = 0) -> list[QuestionSet]:
        with self._session_factory() as db:
            stmt = (
                select(QuestionSetRow)
                .options(selectinload(QuestionSetRow.questions))
                .order_by(desc(QuestionSetRow.created_at), desc(QuestionSetRow.id))
                .offset(offset)
            )
            if limit is not None:
                stmt = stmt.limit(limit)
            rows = db.execute(stmt).scalars().all()
            return [self._to_question_set(row) for row in rows]

    def delete(self, set_id: str) -> bool:
        with self._session_factory() as db:
            row = self._load(db, set_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True
