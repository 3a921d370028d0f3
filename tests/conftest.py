import json

import pytest
from fastapi.testclient import TestClient

from app_server import create_app
from questionnaire.config import Settings
from questionnaire.messages import parse_catalog
from questionnaire.schema import parse_schema


MESSAGES = {
    "en": {
        "required": "This field is required.",
        "maxChars": "At most %d characters.",
        "invalidNumber": "Enter a whole number.",
        "invalidChoice": "Pick a listed option.",
        "questionnaireExplanation": "Please answer.",
        "requiredFields": "Starred fields are required.",
        "scaleExplanation": "1 is low, 5 is high.",
        "thankYou": "Thanks! <a href=\"%s\">Home</a>",
        "saveFailed": "Could not save your answers.",
    },
    "ar": {
        "required": "هذا الحقل مطلوب.",
        "maxChars": "%d حرفًا كحد أقصى.",
        "invalidNumber": "أدخل عددًا صحيحًا.",
        "invalidChoice": "اختر خيارًا من القائمة.",
        "questionnaireExplanation": "يرجى الإجابة.",
        "requiredFields": "الحقول المميزة مطلوبة.",
        "scaleExplanation": "1 منخفض و 5 مرتفع.",
        "thankYou": "شكرًا! <a href=\"%s\">الرئيسية</a>",
        "saveFailed": "تعذّر حفظ الإجابات.",
    },
}

QUESTIONS = {
    "en": [
        {"type": "textBoxQuestion", "question": "Your name", "name": "name", "required": True},
        {"type": "textBoxQuestion", "question": "Nickname", "name": "nickname", "required": False, "maxLength": 5},
        {"type": "numberQuestion", "question": "Age", "name": "age", "required": False},
        {"type": "multipleChoiceQuestion", "question": "Colours", "name": "colours", "required": False,
         "choices": ["red", "blue"]},
        {"type": "singleChoiceQuestion", "question": "Rating", "name": "rating", "required": False,
         "choices": ["1", "2", "3"]},
    ],
    "ar": [
        {"type": "textBoxQuestion", "question": "الاسم", "name": "name", "required": True},
    ],
}


def write_json(path, data):
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture()
def catalog():
    return parse_catalog(MESSAGES)


@pytest.fixture()
def schema():
    return parse_schema(QUESTIONS)


@pytest.fixture()
def sources(tmp_path):
    questions = write_json(tmp_path / "questions.json", QUESTIONS)
    messages = write_json(tmp_path / "messages.json", MESSAGES)
    return questions, messages


@pytest.fixture()
def settings(tmp_path, sources):
    questions, messages = sources
    answers = tmp_path / "answers"
    answers.mkdir()
    return Settings(
        questions_path=str(questions),
        messages_path=str(messages),
        answers_dir=str(answers),
        web_root="/survey/",
    )


@pytest.fixture()
def client(settings):
    return TestClient(create_app(settings))
