# questionnaire/messages.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .cache import SourceCache, read_json_source
from .errors import ConfigurationError


# ---------------------------------------------------------------------
# Keys every locale entry must carry
# ---------------------------------------------------------------------
ERROR_TEMPLATE_KEYS = ("required", "maxChars", "invalidNumber", "invalidChoice")

PAGE_MESSAGE_KEYS = (
    "questionnaireExplanation",
    "requiredFields",
    "scaleExplanation",
    "thankYou",
    "saveFailed",
)

REQUIRED_KEYS = ERROR_TEMPLATE_KEYS + PAGE_MESSAGE_KEYS

# messages formatted with one argument, and a value to try them with
PLACEHOLDER_SAMPLES = (("maxChars", 1), ("thankYou", "/"))


class MessageCatalog:
    def __init__(self, messages: Mapping[str, Mapping[str, str]]) -> None:
        self._messages = messages

    @property
    def locales(self) -> Iterable[str]:
        return list(self._messages.keys())

    def lookup(self, locale: str, key: str) -> str:
        entry = self._messages.get(locale)
        if entry is None:
            raise ConfigurationError(f"Message catalog has no entry for locale {locale!r}.")
        value = entry.get(key)
        if value is None:
            raise ConfigurationError(f"Message catalog entry {locale!r} has no key {key!r}.")
        return value

    def lookup_error_template(self, locale: str, validator_kind: str) -> str:
        if validator_kind not in ERROR_TEMPLATE_KEYS:
            raise ConfigurationError(f"Unknown validator kind {validator_kind!r}.")
        return self.lookup(locale, validator_kind)

    def format(self, locale: str, key: str, arg: Any) -> str:
        """Fill the single printf-style placeholder of a catalog message."""
        template = self.lookup(locale, key)
        try:
            return template % arg
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Message {locale!r}/{key!r} must take exactly one placeholder: {e}"
            ) from e

    def thank_you_message(self, locale: str, root: str) -> str:
        return self.format(locale, "thankYou", root)

    def placeholder_problems(self, locale: str) -> List[str]:
        problems: List[str] = []
        for key, sample in PLACEHOLDER_SAMPLES:
            if key not in self._messages.get(locale, {}):
                continue
            try:
                self.format(locale, key, sample)
            except ConfigurationError as e:
                problems.append(str(e))
        return problems

    def missing_keys(self, locale: str, keys: Iterable[str] = REQUIRED_KEYS) -> list:
        entry = self._messages.get(locale) or {}
        return [k for k in keys if k not in entry]


def parse_catalog(raw: Any) -> MessageCatalog:
    if not isinstance(raw, dict):
        raise ConfigurationError("Message catalog must be a JSON object keyed by locale.")

    messages: Dict[str, Dict[str, str]] = {}
    for locale, entry in raw.items():
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Message catalog entry {locale!r} must be an object.")
        for key, value in entry.items():
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"Message {locale!r}/{key!r} must be a string, got {type(value).__name__}."
                )
        messages[locale] = dict(entry)
    return MessageCatalog(messages)


def load_catalog(path: str, cache: Optional[SourceCache] = None) -> MessageCatalog:
    return parse_catalog(read_json_source(path, cache))
