# questionnaire/forms.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .fields import BaseField, InvalidValue


RawValues = Mapping[str, Union[str, Sequence[str]]]

UNBOUND = "unbound"
BOUND = "bound"
VALID = "valid"
INVALID = "invalid"


def _as_list(value: Union[str, Sequence[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def raw_values_from_form(form_data: Any) -> Dict[str, List[str]]:
    """Turn a multi-dict (e.g. starlette FormData) into name -> [values]."""
    return {key: [str(v) for v in form_data.getlist(key)] for key in form_data.keys()}


class FormInstance:
    """Ordered fields plus, once bound, the submitted values.

    Lifecycle: unbound -> bound (``bind``) -> valid | invalid (``validate``).
    """

    def __init__(self, fields: Sequence[BaseField]) -> None:
        self.fields: List[BaseField] = list(fields)
        self.data: Dict[str, List[str]] = {}
        self.errors: Dict[str, str] = {}
        self.cleaned_data: Dict[str, Any] = {}
        self.state = UNBOUND

    @property
    def is_bound(self) -> bool:
        return self.state != UNBOUND

    def bind(self, raw: RawValues) -> "FormInstance":
        self.data = {f.name: _as_list(raw.get(f.name)) for f in self.fields}
        self.errors = {}
        self.cleaned_data = {}
        self.state = BOUND
        return self

    def values_for(self, name: str) -> List[str]:
        return list(self.data.get(name, []))

    def error_for(self, name: str) -> Optional[str]:
        return self.errors.get(name)

    def _validate_field(self, field: BaseField) -> None:
        values = self.data.get(field.name, [])
        for validator in field.validators:
            if not validator.accepts(field, values):
                self.errors[field.name] = validator.message
                return
        try:
            self.cleaned_data[field.name] = field.clean(values)
        except InvalidValue as e:
            self.errors[field.name] = e.message

    def validate(self) -> bool:
        if not self.is_bound:
            raise RuntimeError("Form is not bound. Call bind() first.")

        self.errors = {}
        self.cleaned_data = {}
        for field in self.fields:
            self._validate_field(field)

        if self.errors:
            self.cleaned_data = {}
            self.state = INVALID
            return False
        self.state = VALID
        return True

    def is_valid(self) -> bool:
        if self.state in (VALID, INVALID):
            return self.state == VALID
        return self.validate()
