import json
import os

import pytest

from conftest import MESSAGES, QUESTIONS, write_json
from questionnaire.cache import SourceCache, read_json_source
from questionnaire.checks import check_sources, find_source_problems
from questionnaire.config import Settings
from questionnaire.errors import ConfigurationError
from questionnaire.messages import load_catalog, parse_catalog
from questionnaire.schema import load_schema, parse_schema


# ---------------------------------------------------------------------
# Question schema
# ---------------------------------------------------------------------
def test_questions_keep_declared_order(schema):
    names = [q.name for q in schema.questions_for("en")]
    assert names == ["name", "nickname", "age", "colours", "rating"]


def test_question_fields_are_mapped(schema):
    nickname = schema.questions_for("en")[1]
    assert nickname.label == "Nickname"
    assert nickname.required is False
    assert nickname.max_length == 5
    assert nickname.choices is None


def test_missing_locale_in_schema_is_configuration_error(schema):
    with pytest.raises(ConfigurationError):
        schema.questions_for("fr")


@pytest.mark.parametrize(
    "question",
    [
        {"type": "textBoxQuestion", "question": "Q", "name": "q", "required": "yes"},
        {"type": "textBoxQuestion", "question": "Q", "name": "q", "required": True, "maxLength": -1},
        {"type": "textBoxQuestion", "question": "Q", "name": "q", "required": True, "maxLength": "10"},
        {"type": "singleChoiceQuestion", "question": "Q", "name": "q", "required": True, "choices": 3},
        {"type": "textBoxQuestion", "name": "q", "required": True},
        {"type": "textBoxQuestion", "question": "Q", "name": "q"},
        "not an object",
    ],
)
def test_malformed_question_is_configuration_error(question):
    with pytest.raises(ConfigurationError):
        parse_schema({"en": [question]})


def test_unknown_question_type_still_loads():
    schema = parse_schema({"en": [{"type": "sliderQuestion", "question": "Q", "name": "q", "required": False}]})
    assert schema.questions_for("en")[0].type == "sliderQuestion"


def test_schema_must_be_object_of_arrays():
    with pytest.raises(ConfigurationError):
        parse_schema([])
    with pytest.raises(ConfigurationError):
        parse_schema({"en": {}})


# ---------------------------------------------------------------------
# Message catalog
# ---------------------------------------------------------------------
def test_lookup_returns_locale_text(catalog):
    assert catalog.lookup("en", "required") == "This field is required."
    assert catalog.lookup("ar", "required") == "هذا الحقل مطلوب."
    assert catalog.lookup_error_template("en", "maxChars") == "At most %d characters."


def test_lookup_failures_are_configuration_errors(catalog):
    with pytest.raises(ConfigurationError):
        catalog.lookup("fr", "required")
    with pytest.raises(ConfigurationError):
        catalog.lookup("en", "nope")
    with pytest.raises(ConfigurationError):
        catalog.lookup_error_template("en", "questionnaireExplanation")


def test_thank_you_message_takes_link_target(catalog):
    assert catalog.thank_you_message("en", "/survey/") == 'Thanks! <a href="/survey/">Home</a>'


def test_catalog_values_must_be_strings():
    with pytest.raises(ConfigurationError):
        parse_catalog({"en": {"required": 1}})
    with pytest.raises(ConfigurationError):
        parse_catalog({"en": ["required"]})


def test_missing_and_malformed_files(tmp_path):
    with pytest.raises(ConfigurationError):
        load_catalog(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_schema(str(broken))


def test_schema_and_catalog_locales_match(schema, catalog):
    assert sorted(schema.locales) == sorted(catalog.locales)
    for locale in schema.locales:
        schema.questions_for(locale)
        assert catalog.missing_keys(locale) == []


# ---------------------------------------------------------------------
# Source cache
# ---------------------------------------------------------------------
def test_cache_reuses_unchanged_file(tmp_path):
    path = write_json(tmp_path / "messages.json", MESSAGES)
    cache = SourceCache()
    first = read_json_source(str(path), cache)
    assert read_json_source(str(path), cache) is first
    assert len(cache) == 1


def test_cache_miss_reflects_latest_file(tmp_path):
    path = write_json(tmp_path / "messages.json", {"en": {"required": "old"}})
    cache = SourceCache()
    assert read_json_source(str(path), cache)["en"]["required"] == "old"

    path.write_text(json.dumps({"en": {"required": "newer text"}}), encoding="utf-8")
    st = os.stat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))

    assert read_json_source(str(path), cache)["en"]["required"] == "newer text"


def test_cache_invalidate_and_clear(tmp_path):
    path = write_json(tmp_path / "messages.json", MESSAGES)
    cache = SourceCache()
    first = read_json_source(str(path), cache)
    cache.invalidate(str(path))
    assert read_json_source(str(path), cache) is not first
    cache.clear()
    assert len(cache) == 0


# ---------------------------------------------------------------------
# Startup checks
# ---------------------------------------------------------------------
def test_check_sources_accepts_complete_sources(settings):
    check_sources(settings)


def test_locale_mismatch_is_reported(tmp_path):
    questions = write_json(tmp_path / "q.json", {"en": QUESTIONS["en"]})
    messages = write_json(tmp_path / "m.json", MESSAGES)
    settings = Settings(questions_path=str(questions), messages_path=str(messages))
    with pytest.raises(ConfigurationError, match="do not match"):
        check_sources(settings)


def test_missing_catalog_keys_are_reported(schema):
    messages = {"en": dict(MESSAGES["en"]), "ar": dict(MESSAGES["ar"])}
    del messages["ar"]["maxChars"]
    problems = find_source_problems(schema, parse_catalog(messages), ["en", "ar"])
    assert problems == ["catalog 'ar' is missing keys ['maxChars']"]


def test_duplicate_question_names_are_reported(catalog):
    schema = parse_schema({"en": QUESTIONS["en"] + QUESTIONS["en"][:1], "ar": QUESTIONS["ar"]})
    problems = find_source_problems(schema, catalog, ["en", "ar"])
    assert problems == ["schema 'en' repeats question names ['name']"]


@pytest.mark.parametrize(
    "key, value",
    [("maxChars", "Too long."), ("maxChars", "%d of %d"), ("thankYou", "Thanks!")],
)
def test_bad_placeholders_are_reported(tmp_path, key, value):
    messages = {"en": dict(MESSAGES["en"]), "ar": dict(MESSAGES["ar"])}
    messages["en"][key] = value
    catalog = parse_catalog(messages)

    problems = find_source_problems(parse_schema(QUESTIONS), catalog, ["en", "ar"])
    assert len(problems) == 1
    assert key in problems[0]

    questions = write_json(tmp_path / "q.json", QUESTIONS)
    catalog_path = write_json(tmp_path / "m.json", messages)
    with pytest.raises(ConfigurationError, match=key):
        check_sources(Settings(questions_path=str(questions), messages_path=str(catalog_path)))


def test_format_fills_single_placeholder(catalog):
    assert catalog.format("en", "maxChars", 7) == "At most 7 characters."
    broken = parse_catalog({"en": {"thankYou": "Thanks!"}})
    with pytest.raises(ConfigurationError):
        broken.thank_you_message("en", "/")
