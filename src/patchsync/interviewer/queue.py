from __future__ import annotations

from collections import deque

from patchsync.interviewer.models import Answer, AnswerValue, Question


class QueueInterviewer:
    def __init__(self, answers: list[Answer]) -> None:
        self._answers: deque[Answer] = deque(answers)
        self.asked: list[Question] = []

    def ask(self, question: Question) -> Answer:
        self.asked.append(question)
        if self._answers:
            return self._answers.popleft()
        return Answer(value=AnswerValue.SKIPPED)
