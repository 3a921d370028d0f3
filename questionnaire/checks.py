# questionnaire/checks.py
from __future__ import annotations

from typing import List, Optional

from .cache import SourceCache
from .config import Settings
from .errors import ConfigurationError
from .messages import MessageCatalog, load_catalog
from .schema import QuestionSchema, load_schema


def find_source_problems(schema: QuestionSchema, catalog: MessageCatalog, locales: List[str]) -> List[str]:
    problems: List[str] = []

    schema_locales = set(schema.locales)
    catalog_locales = set(catalog.locales)
    if schema_locales != catalog_locales:
        problems.append(
            f"schema locales {sorted(schema_locales)} do not match catalog locales {sorted(catalog_locales)}"
        )

    for locale in locales:
        if locale not in schema_locales:
            problems.append(f"schema has no entry for supported locale {locale!r}")
        else:
            names = [q.name for q in schema.questions_for(locale)]
            duplicates = sorted({n for n in names if names.count(n) > 1})
            if duplicates:
                problems.append(f"schema {locale!r} repeats question names {duplicates}")

        if locale not in catalog_locales:
            problems.append(f"catalog has no entry for supported locale {locale!r}")
        else:
            missing = catalog.missing_keys(locale)
            if missing:
                problems.append(f"catalog {locale!r} is missing keys {missing}")
            problems.extend(catalog.placeholder_problems(locale))

    return problems


def check_sources(settings: Settings, cache: Optional[SourceCache] = None) -> None:
    """Refuse to serve with an incomplete schema or catalog."""
    schema = load_schema(settings.questions_path, cache)
    catalog = load_catalog(settings.messages_path, cache)

    problems = find_source_problems(schema, catalog, list(settings.locales))
    if problems:
        raise ConfigurationError("Invalid questionnaire sources: " + "; ".join(problems))
