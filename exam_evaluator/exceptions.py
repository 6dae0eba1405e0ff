"""
Error types raised by the result store, query layer and evaluation client.
"""


class ExamEvaluatorError(Exception):
    """Base class for all application errors."""


class StorageError(ExamEvaluatorError):
    """The storage backend could not read or write a value."""


class CorruptStateError(ExamEvaluatorError):
    """The stored result list could not be decoded."""


class InvalidResultError(ExamEvaluatorError):
    """A result handed to the store does not match the ExamResult schema."""


class EvaluationError(ExamEvaluatorError):
    """The grading model failed or returned unusable output."""
