"""Domain models for survey questions."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

OTHER_VALUE = "other"

# question id -> answer value, built up one step at a time
ResponseRecord = Dict[str, Any]


class QuestionKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    SINGLE_CHOICE = "single_choice"
    SINGLE_CHOICE_OTHER = "single_choice_other"
    LIKERT = "likert"
    HEADER = "header"


CHOICE_KINDS = (QuestionKind.SINGLE_CHOICE, QuestionKind.SINGLE_CHOICE_OTHER)


class Choice(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str


LIKERT_CHOICES: Tuple[Choice, ...] = (
    Choice(label="Strongly Disagree", value="1"),
    Choice(label="Disagree", value="2"),
    Choice(label="Neutral", value="3"),
    Choice(label="Agree", value="4"),
    Choice(label="Strongly Agree", value="5"),
)


def companion_id(question_id: str) -> str:
    """Id of the free-text field that backs an "other" answer."""
    return f"{question_id}Other"


class QuestionDefinition(BaseModel):
    """
    One entry of the question catalog.

    Immutable. Ordering inside the catalog defines traversal order and the
    "QUESTION n" numbering; headers are never answerable.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    kind: QuestionKind
    prompt: str
    choices: Tuple[Choice, ...] = ()
    required: bool = False

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        kind = data.get("kind")
        if kind in (QuestionKind.LIKERT, QuestionKind.LIKERT.value) and not data.get("choices"):
            data = {**data, "choices": LIKERT_CHOICES}
        if kind in (QuestionKind.HEADER, QuestionKind.HEADER.value):
            data = {**data, "required": False}
        return data

    @model_validator(mode="after")
    def _check_choices(self) -> "QuestionDefinition":
        if self.kind in CHOICE_KINDS and not self.choices:
            raise ValueError(f"question {self.id!r} needs at least one choice")
        return self

    @property
    def is_answerable(self) -> bool:
        return self.kind != QuestionKind.HEADER

    @property
    def has_other(self) -> bool:
        return self.kind == QuestionKind.SINGLE_CHOICE_OTHER

    @property
    def auto_advances(self) -> bool:
        return self.kind in (
            QuestionKind.SINGLE_CHOICE,
            QuestionKind.SINGLE_CHOICE_OTHER,
            QuestionKind.LIKERT,
        )

    def choice_values(self) -> List[str]:
        values = [c.value for c in self.choices]
        if self.has_other:
            values.append(OTHER_VALUE)
        return values
