# questionnaire/schema.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .cache import SourceCache, read_json_source
from .errors import ConfigurationError
from .models import Question


class QuestionSchema:
    """Per-locale question lists, in the order the source declares them."""

    def __init__(self, questions: Dict[str, List[Question]]) -> None:
        self._questions = questions

    @property
    def locales(self) -> List[str]:
        return list(self._questions.keys())

    def questions_for(self, locale: str) -> List[Question]:
        questions = self._questions.get(locale)
        if questions is None:
            raise ConfigurationError(f"Question schema has no entry for locale {locale!r}.")
        return list(questions)


def _parse_question(locale: str, index: int, item: Any) -> Question:
    if not isinstance(item, dict):
        raise ConfigurationError(f"Question {locale}[{index}] must be an object.")
    try:
        return Question.model_validate(item)
    except ValidationError as e:
        raise ConfigurationError(f"Question {locale}[{index}] is malformed: {e}") from e


def parse_schema(raw: Any) -> QuestionSchema:
    if not isinstance(raw, dict):
        raise ConfigurationError("Question schema must be a JSON object keyed by locale.")

    questions: Dict[str, List[Question]] = {}
    for locale, items in raw.items():
        if not isinstance(items, list):
            raise ConfigurationError(f"Question schema entry {locale!r} must be an array.")
        questions[locale] = [_parse_question(locale, i, item) for i, item in enumerate(items)]
    return QuestionSchema(questions)


def load_schema(path: str, cache: Optional[SourceCache] = None) -> QuestionSchema:
    return parse_schema(read_json_source(path, cache))
