# questionnaire/fields.py
from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

from .messages import MessageCatalog
from .models import Option, Question, QuestionType


logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


class InvalidValue(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------------------
# Validators (fixed order: Required, MaxLength)
# ---------------------------------------------------------------------
class Validator:
    kind = ""

    def __init__(self, message: str) -> None:
        self.message = message

    def accepts(self, field: "BaseField", values: Sequence[str]) -> bool:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({vars(self)!r})"


class Required(Validator):
    kind = "required"

    def accepts(self, field: "BaseField", values: Sequence[str]) -> bool:
        return not field.is_empty(values)


class MaxLength(Validator):
    kind = "maxChars"

    def __init__(self, limit: int, message: str) -> None:
        super().__init__(message)
        self.limit = limit

    def accepts(self, field: "BaseField", values: Sequence[str]) -> bool:
        return field.size(values) <= self.limit


# ---------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------
class BaseField:
    """A question turned into an input: label, validator chain, widget data.

    Fields hold no submitted data; a FormInstance binds values to them.
    """

    widget = "text"

    def __init__(
        self,
        name: str,
        label: str,
        validators: Optional[List[Validator]] = None,
        required: bool = False,
        attrs: Optional[Dict[str, str]] = None,
        options: Optional[List[Option]] = None,
        invalid_message: str = "",
    ) -> None:
        self.name = name
        self.label = label
        self.validators = list(validators or [])
        self.required = required
        self.attrs = dict(attrs or {})
        self.options = list(options or [])
        self.invalid_message = invalid_message

    def first(self, values: Sequence[str]) -> str:
        return values[0] if values else ""

    def is_empty(self, values: Sequence[str]) -> bool:
        return self.first(values).strip() == ""

    def size(self, values: Sequence[str]) -> int:
        return len(self.first(values))

    def clean(self, values: Sequence[str]) -> Any:
        return self.first(values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class TextField(BaseField):
    widget = "text"


class IntegerField(BaseField):
    widget = "number"

    def clean(self, values: Sequence[str]) -> Optional[int]:
        raw = self.first(values).strip()
        if raw == "":
            return None
        if not _INTEGER_RE.match(raw):
            raise InvalidValue(self.invalid_message)
        try:
            return int(raw)
        except ValueError:
            # more digits than int() will convert
            raise InvalidValue(self.invalid_message)


class SingleChoiceField(BaseField):
    widget = "radio"

    def clean(self, values: Sequence[str]) -> str:
        raw = self.first(values)
        if raw == "":
            return ""
        if raw not in {o.value for o in self.options}:
            raise InvalidValue(self.invalid_message)
        return raw


class MultipleChoiceField(BaseField):
    widget = "checkbox"

    def selections(self, values: Sequence[str]) -> List[str]:
        return [v for v in values if v != ""]

    def is_empty(self, values: Sequence[str]) -> bool:
        return not self.selections(values)

    def size(self, values: Sequence[str]) -> int:
        return len(set(self.selections(values)))

    def clean(self, values: Sequence[str]) -> List[str]:
        picked = set(self.selections(values))
        declared = [o.value for o in self.options]
        if picked - set(declared):
            raise InvalidValue(self.invalid_message)
        # declared order, not submission order
        return [v for v in declared if v in picked]


# ---------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------
def build_validators(question: Question, locale: str, catalog: MessageCatalog) -> List[Validator]:
    validators: List[Validator] = []
    if question.required:
        validators.append(Required(catalog.lookup_error_template(locale, Required.kind)))
    if question.max_length is not None:
        limit = question.max_length
        validators.append(MaxLength(limit, catalog.format(locale, MaxLength.kind, limit)))
    return validators


def build_options(question: Question) -> List[Option]:
    return [Option(value=c, display=c) for c in (question.choices or [])]


def _choice_attrs(question: Question) -> Dict[str, str]:
    return {"class": question.name, "id": question.name}


def _text(q: Question, locale: str, catalog: MessageCatalog) -> BaseField:
    return TextField(q.name, q.label, build_validators(q, locale, catalog), required=q.required)


def _number(q: Question, locale: str, catalog: MessageCatalog) -> BaseField:
    return IntegerField(
        q.name,
        q.label,
        build_validators(q, locale, catalog),
        required=q.required,
        invalid_message=catalog.lookup_error_template(locale, "invalidNumber"),
    )


def _multiple_choice(q: Question, locale: str, catalog: MessageCatalog) -> BaseField:
    return MultipleChoiceField(
        q.name,
        q.label,
        build_validators(q, locale, catalog),
        required=q.required,
        attrs=_choice_attrs(q),
        options=build_options(q),
        invalid_message=catalog.lookup_error_template(locale, "invalidChoice"),
    )


def _single_choice(q: Question, locale: str, catalog: MessageCatalog) -> BaseField:
    return SingleChoiceField(
        q.name,
        q.label,
        build_validators(q, locale, catalog),
        required=q.required,
        attrs=_choice_attrs(q),
        options=build_options(q),
        invalid_message=catalog.lookup_error_template(locale, "invalidChoice"),
    )


FIELD_BUILDERS: Dict[QuestionType, Callable[[Question, str, MessageCatalog], BaseField]] = {
    QuestionType.TEXT_BOX: _text,
    QuestionType.NUMBER: _number,
    QuestionType.MULTIPLE_CHOICE: _multiple_choice,
    QuestionType.SINGLE_CHOICE: _single_choice,
}


def build_field(question: Question, locale: str, catalog: MessageCatalog) -> Optional[BaseField]:
    try:
        qtype = QuestionType(question.type)
    except ValueError:
        logger.warning(
            "[Schema] skipping question %r (locale=%s): unknown type %r",
            question.name, locale, question.type,
        )
        return None
    return FIELD_BUILDERS[qtype](question, locale, catalog)


def build_fields(questions: Sequence[Question], locale: str, catalog: MessageCatalog) -> List[BaseField]:
    fields: List[BaseField] = []
    for question in questions:
        field = build_field(question, locale, catalog)
        if field is not None:
            fields.append(field)
    return fields
