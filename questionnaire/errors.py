# questionnaire/errors.py
from __future__ import annotations


class QuestionnaireError(Exception):
    pass


class ConfigurationError(QuestionnaireError):
    """Schema, message catalog or settings are missing or malformed."""


class PersistenceError(QuestionnaireError):
    """An answer record could not be written."""
