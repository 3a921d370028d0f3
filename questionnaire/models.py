# questionnaire/models.py
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr


class QuestionType(str, Enum):
    TEXT_BOX = "textBoxQuestion"
    NUMBER = "numberQuestion"
    MULTIPLE_CHOICE = "multipleChoiceQuestion"
    SINGLE_CHOICE = "singleChoiceQuestion"


class Question(BaseModel):
    """One entry of the questions source.

    ``type`` stays a plain string: unknown types must survive loading so the
    field builder can report and skip them.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: StrictStr
    name: StrictStr = Field(..., min_length=1)
    label: StrictStr = Field(..., alias="question")
    required: StrictBool
    max_length: Optional[StrictInt] = Field(None, alias="maxLength", ge=0)
    choices: Optional[List[StrictStr]] = None


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    display: str
    selected_by_default: bool = False
    disabled: bool = False
