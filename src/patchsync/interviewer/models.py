from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class AnswerValue(str, Enum):
    YES = "YES"
    NO = "NO"
    SKIPPED = "SKIPPED"
    ABORTED = "ABORTED"


class Answer(BaseModel):
    value: AnswerValue = AnswerValue.SKIPPED

    @property
    def approved(self) -> bool:
        return self.value == AnswerValue.YES


class Question(BaseModel):
    text: str
    stage: str = ""
