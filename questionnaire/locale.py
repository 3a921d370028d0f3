# questionnaire/locale.py
from __future__ import annotations

from typing import Sequence


SUPPORTED_LOCALES = ("en", "ar")
DEFAULT_LOCALE = "en"

RTL_LOCALES = frozenset({"ar"})


def resolve_locale(
    raw: str,
    supported: Sequence[str] = SUPPORTED_LOCALES,
    default: str = DEFAULT_LOCALE,
) -> str:
    # exact match only: "EN", " en" and "en-US" all fall back
    if raw in supported:
        return raw
    return default


def locale_from_path(
    path: str,
    supported: Sequence[str] = SUPPORTED_LOCALES,
    default: str = DEFAULT_LOCALE,
) -> str:
    token = (path or "").lstrip("/").split("/", 1)[0]
    return resolve_locale(token, supported=supported, default=default)


def text_direction(locale: str) -> str:
    return "rtl" if locale in RTL_LOCALES else "ltr"
