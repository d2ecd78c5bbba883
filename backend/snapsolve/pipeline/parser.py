"""Parse a vision model's free-form answer into question records.

The model is asked for numbered questions with lettered options followed by
``Answer:`` and ``Explanation:`` lines, but nothing enforces that shape, so
parsing happens in two passes:

1. ``split_blocks`` cuts the text into one chunk per question. Numbered
   anchors (``1.``, ``2)``, ``Q3:``, ``Question 4``) are preferred; only
   forward-moving numbers start a new block, and a numbered line that
   continues a ``1) 2) 3)`` run inside the current block stays in that block.
   Without anchors it falls back to ``Question:`` labels and then to
   blank-line paragraphs.
2. ``parse_block`` walks one chunk line by line and fills text, options,
   answer and explanation independently, so a missing field only affects its
   own block.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from snapsolve.domain.models import (
    MAX_ANSWER_LENGTH,
    MAX_EXPLANATION_LENGTH,
    MAX_QUESTION_TEXT_LENGTH,
    Question,
    QuestionType,
)

logger = logging.getLogger(__name__)

_EMPHASIS = re.compile(r"\*\*|__")
_HEADING = re.compile(r"^\s*#{1,6}\s*")
_QUOTE = re.compile(r"^\s*(?:>\s?)+")
_RULE = re.compile(r"^\s*(?:[-*_=]\s*){3,}$|^\s*```")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

_LABEL_PREFIX = r"^[\s*_>✅✔☑]*"
_LABEL_SEP = r"[\s*_]*[:：\-–—][\s*_]*"

_LABELED_ANCHOR = re.compile(
    r"^\s*(?:question|q)\s*(?:no\.?\s*)?#?\s*(\d{1,3})\b[\s*_]*[.):\-–—]?\s*(.*)$",
    re.IGNORECASE,
)
_NUMBERED_ANCHOR = re.compile(r"^\s*\(?(\d{1,3})([.):])(?:\s+(.*))?$")
_QUESTION_LABEL = re.compile(_LABEL_PREFIX + r"question(?:\s+text)?" + _LABEL_SEP + r"(.*)$", re.IGNORECASE)
_ANSWER_LABEL = re.compile(
    _LABEL_PREFIX + r"(?:the\s+)?(?:correct\s+|final\s+)?(?:answer|ans)(?:\s+key)?(?:\s+is)?" + _LABEL_SEP + r"(.*)$",
    re.IGNORECASE,
)
_EXPLANATION_LABEL = re.compile(
    _LABEL_PREFIX + r"(?:explanation|reason(?:ing)?|rationale|solution|justification)" + _LABEL_SEP + r"(.*)$",
    re.IGNORECASE,
)

_LETTER_OPTION = re.compile(r"^\s*\(?([A-Ha-h])\s*[.)\]:]\s+(.+)$")
_NUMBER_OPTION = re.compile(r"^\s*\(?([1-9])\s*[.)\]]\s+(.+)$")
_BULLET_OPTION = re.compile(r"^\s*[-*•●○◦▪▫‣⁃]\s+(.+)$")
_CIRCLED_OPTION = re.compile(r"^\s*([①-⑳])\s*(.+)$")
_INLINE_OPTION = re.compile(r"(?:^|(?<=\s))\(?([A-Ha-h])[.)]\s+")

_MODE_TEXT = "text"
_MODE_OPTIONS = "options"
_MODE_ANSWER = "answer"
_MODE_EXPLANATION = "explanation"


@dataclass
class RawBlock:
    number: str | None
    lines: list[str] = field(default_factory=list)


@dataclass
class _BlockDraft:
    text_lines: list[str] = field(default_factory=list)
    options: list[str] = field(default_factory=list)
    option_lines: list[str] = field(default_factory=list)
    answer_lines: list[str] | None = None
    explanation_lines: list[str] | None = None
    mode: str = _MODE_TEXT


def clean_line(line: str) -> str:
    """Drop markdown decoration that carries no content."""
    if _RULE.match(line):
        return ""
    line = _QUOTE.sub("", line)
    line = _HEADING.sub("", line)
    line = _EMPHASIS.sub("", line)
    return line.rstrip()


def _is_field_label(line: str) -> bool:
    return bool(_ANSWER_LABEL.match(line) or _EXPLANATION_LABEL.match(line))


def _is_bare_field_label(line: str) -> bool:
    """`Answer:` with its value on the following line."""
    match = _ANSWER_LABEL.match(line) or _EXPLANATION_LABEL.match(line)
    return bool(match) and not match.group(1).strip()


def _match_option(line: str) -> str | None:
    for pattern in (_LETTER_OPTION, _NUMBER_OPTION, _CIRCLED_OPTION):
        match = pattern.match(line)
        if match:
            return match.group(2).strip()
    match = _BULLET_OPTION.match(line)
    if match:
        return match.group(1).strip()
    return None


def split_inline_options(line: str) -> tuple[str, list[str]] | None:
    """Split ``"Capital? A) Paris B) London"`` into its prefix and option texts."""
    markers: list[re.Match[str]] = []
    for match in _INLINE_OPTION.finditer(line):
        letter = match.group(1)
        if not markers:
            if letter in "Aa":
                markers.append(match)
            continue
        if ord(letter) == ord(markers[-1].group(1)) + 1:
            markers.append(match)

    if len(markers) < 2:
        return None

    options: list[str] = []
    for idx, match in enumerate(markers):
        end = markers[idx + 1].start() if idx + 1 < len(markers) else len(line)
        text = line[match.end():end].strip()
        if not text:
            return None
        options.append(text)
    return line[: markers[0].start()].strip(), options


def _clip(value: str, limit: int) -> str:
    return value if len(value) <= limit else value[:limit].rstrip()


def _join(lines: list[str] | None, limit: int) -> str | None:
    if lines is None:
        return None
    joined = "\n".join(item for item in lines if item).strip()
    return _clip(joined, limit) if joined else None


class ResponseParser:
    """Pure text-to-questions parser; holds no state between calls."""

    @staticmethod
    def _normalize_text(raw_text: str) -> str:
        text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
        return _CONTROL_CHARS.sub("", text).strip()

    def split_blocks(self, raw_text: str) -> tuple[list[str], list[RawBlock]]:
        """Return (preamble lines, numbered blocks) in document order."""
        text = self._normalize_text(raw_text or "")
        if not text:
            return [], []

        preamble: list[str] = []
        blocks: list[RawBlock] = []
        current: RawBlock | None = None
        last_number = 0
        question_sep: str | None = None
        run_last = 0
        run_sep: str | None = None
        labeled_anchors = False
        awaiting_value = False

        def start_block(number: int, rest: str | None) -> RawBlock:
            block = RawBlock(number=str(number))
            if rest:
                block.lines.append(rest)
            blocks.append(block)
            return block

        for raw_line in text.split("\n"):
            line = clean_line(raw_line)
            if not line.strip():
                if current is None:
                    preamble.append(line)
                else:
                    current.lines.append(line)
                continue

            explicit_anchor = _is_field_label(line) or _LABELED_ANCHOR.match(line)
            if awaiting_value and current is not None and not explicit_anchor:
                # The line after a bare label is that field's value, numbered or not.
                awaiting_value = False
                value = _NUMBERED_ANCHOR.match(line)
                if value and int(value.group(1)) == 1:
                    run_last, run_sep = 1, value.group(2)
                current.lines.append(line)
                continue
            awaiting_value = False

            labeled = _LABELED_ANCHOR.match(line)
            if labeled and not _is_field_label(line):
                number = int(labeled.group(1))
                current = start_block(number, labeled.group(2).strip())
                labeled_anchors = True
                last_number, run_last, run_sep = number, 0, None
                continue

            numbered = _NUMBERED_ANCHOR.match(line)
            if numbered:
                number, sep = int(numbered.group(1)), numbered.group(2)
                rest = (numbered.group(3) or "").strip()
                if current is None:
                    current = start_block(number, rest)
                    last_number, question_sep = number, sep
                    continue

                if run_last and number == run_last + 1:
                    breaks_run = sep == question_sep and run_sep != question_sep
                    if not (breaks_run and number > last_number):
                        run_last = number
                        current.lines.append(line)
                        continue

                if number > last_number and not labeled_anchors:
                    current = start_block(number, rest)
                    last_number, run_last, run_sep = number, 0, None
                    continue

                if number == 1:
                    run_last, run_sep = 1, sep
                current.lines.append(line)
                continue

            if _is_field_label(line):
                run_last, run_sep = 0, None
                awaiting_value = _is_bare_field_label(line)

            if current is None:
                preamble.append(line)
            else:
                current.lines.append(line)

        return preamble, blocks

    @staticmethod
    def _split_unnumbered(lines: list[str]) -> list[RawBlock]:
        if any(_QUESTION_LABEL.match(line) for line in lines):
            blocks: list[RawBlock] = []
            for line in lines:
                if _QUESTION_LABEL.match(line) or not blocks:
                    blocks.append(RawBlock(number=None))
                blocks[-1].lines.append(line)
            return blocks

        paragraphs: list[list[str]] = []
        pending: list[str] = []
        for line in lines + [""]:
            if line.strip():
                pending.append(line)
                continue
            if pending:
                paragraphs.append(pending)
                pending = []

        blocks = []
        for paragraph in paragraphs:
            head = paragraph[0].strip()
            continues_previous = _is_field_label(head) or _match_option(head) is not None
            if blocks and continues_previous:
                blocks[-1].lines.extend(paragraph)
            else:
                blocks.append(RawBlock(number=None, lines=list(paragraph)))
        return blocks

    @staticmethod
    def parse_block(lines: list[str]) -> Question | None:
        draft = _BlockDraft()

        for raw_line in lines:
            line = raw_line.strip()
            if not line:
                continue

            answer = _ANSWER_LABEL.match(line)
            if answer:
                draft.mode = _MODE_ANSWER
                draft.answer_lines = [answer.group(1).strip()]
                continue

            explanation = _EXPLANATION_LABEL.match(line)
            if explanation:
                draft.mode = _MODE_EXPLANATION
                draft.explanation_lines = [explanation.group(1).strip()]
                continue

            if draft.mode == _MODE_ANSWER:
                draft.answer_lines.append(line)
                continue
            if draft.mode == _MODE_EXPLANATION:
                draft.explanation_lines.append(line)
                continue

            question_label = _QUESTION_LABEL.match(line)
            if question_label and draft.mode == _MODE_TEXT:
                rest = question_label.group(1).strip()
                if rest:
                    draft.text_lines.append(rest)
                continue

            inline = split_inline_options(line)
            if inline is not None:
                prefix, options = inline
                if prefix and draft.mode == _MODE_TEXT:
                    draft.text_lines.append(prefix)
                draft.options.extend(options)
                draft.option_lines.append(line)
                draft.mode = _MODE_OPTIONS
                continue

            option = _match_option(line)
            if option is not None:
                draft.options.append(option)
                draft.option_lines.append(line)
                draft.mode = _MODE_OPTIONS
                continue

            if draft.mode == _MODE_OPTIONS:
                draft.options[-1] = f"{draft.options[-1]} {line}"
                draft.option_lines[-1] = f"{draft.option_lines[-1]} {line}"
            else:
                draft.text_lines.append(line)

        if len(draft.options) < 2:
            # A lone option-looking line is more likely part of the prompt.
            draft.text_lines.extend(draft.option_lines)
            draft.options = []

        text = _join(draft.text_lines, MAX_QUESTION_TEXT_LENGTH)
        if not text:
            return None

        return Question(
            text=text,
            type=QuestionType.MULTIPLE_CHOICE if draft.options else QuestionType.GENERAL,
            options=list(draft.options),
            answer=_join(draft.answer_lines, MAX_ANSWER_LENGTH),
            explanation=_join(draft.explanation_lines, MAX_EXPLANATION_LENGTH),
        )

    @staticmethod
    def _carries_fields(question: Question) -> bool:
        return question.is_multiple_choice or question.answer is not None

    def parse(self, raw_text: str) -> list[Question]:
        preamble, blocks = self.split_blocks(raw_text)
        if not blocks:
            blocks = self._split_unnumbered(preamble)
            preamble = []

        questions: list[Question] = []
        if any(line.strip() for line in preamble):
            lead = self.parse_block(preamble)
            if lead is not None and self._carries_fields(lead):
                questions.append(lead)
            else:
                logger.debug("Dropped %d preamble line(s) before the first question", len(preamble))

        for block in blocks:
            question = self.parse_block(block.lines)
            if question is None:
                logger.debug("Dropped block %s: no question text", block.number or "?")
                continue
            questions.append(question)

        return questions


def parse_questions(raw_text: str) -> list[Question]:
    return ResponseParser().parse(raw_text)
