from __future__ import annotations

from patchsync.interviewer.models import Answer, AnswerValue, Question


class AutoApproveInterviewer:
    def ask(self, question: Question) -> Answer:
        return Answer(value=AnswerValue.YES)
