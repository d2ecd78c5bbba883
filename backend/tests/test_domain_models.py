from datetime import datetime, timezone

import pytest

from snapsolve.domain.models import Question, QuestionSet, QuestionType


def _set(set_id: str = "qs_a") -> QuestionSet:
    return QuestionSet(id=set_id, title="Sample", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))


def test_constructor_takes_ownership_of_questions():
    first = Question(text="One?")
    second = Question(text="Two?", type=QuestionType.MULTIPLE_CHOICE, options=["a", "b"])

    question_set = QuestionSet(id="qs_x", title="Both", questions=[first, second])

    assert question_set.question_count == 2
    assert first.question_set is question_set
    assert second.is_multiple_choice


def test_question_cannot_belong_to_two_sets():
    question = Question(text="Shared?")
    owner, other = _set("qs_owner"), _set("qs_other")
    owner.add_question(question)

    with pytest.raises(ValueError):
        other.add_question(question)

    assert other.question_count == 0


def test_adding_same_question_twice_is_a_no_op():
    question = Question(text="Again?")
    question_set = _set()

    question_set.add_question(question)
    question_set.add_question(question)

    assert question_set.question_count == 1


def test_remove_question_releases_it():
    question = Question(text="Move me?")
    source, target = _set("qs_src"), _set("qs_dst")
    source.add_question(question)

    source.remove_question(question)
    target.add_question(question)

    assert source.question_count == 0
    assert question.question_set is target


def test_remove_unknown_question_raises():
    with pytest.raises(ValueError):
        _set().remove_question(Question(text="Stranger?"))


def test_created_at_is_immutable():
    question_set = _set()

    with pytest.raises(AttributeError):
        question_set.created_at = datetime.now(timezone.utc)


def test_question_equality_ignores_owner():
    left, right = Question(text="Same?"), Question(text="Same?")
    _set("qs_l").add_question(left)

    assert left == right
