"""Error taxonomy shared by the pipeline, the renderers and the HTTP layer."""

from __future__ import annotations


class SnapSolveError(Exception):
    """Base class; ``status_code`` is what the HTTP boundary reports."""

    status_code = 500


class InputValidationError(SnapSolveError):
    status_code = 400


class EmptyInputError(InputValidationError):
    """No image bytes were supplied."""


class InvalidImageEncodingError(InputValidationError):
    """A pasted image string could not be decoded as base64."""


class TransportError(SnapSolveError):
    """The extraction backend was unreachable, rejected the call or answered garbage."""

    status_code = 502


class ExtractionTimeoutError(TransportError):
    status_code = 504


class NoQuestionsExtractedError(SnapSolveError):
    """The image was processed but no question could be parsed from the response."""

    status_code = 422


class RenderingFailedError(SnapSolveError):
    status_code = 500


class QuestionSetNotFoundError(SnapSolveError):
    status_code = 404

    def __init__(self, set_id: str):
        super().__init__(f"Question set not found: {set_id}")
        self.set_id = set_id
