from patchsync.interviewer.auto_approve import AutoApproveInterviewer
from patchsync.interviewer.base import Interviewer
from patchsync.interviewer.console import ConsoleInterviewer
from patchsync.interviewer.models import Answer, AnswerValue, Question
from patchsync.interviewer.queue import QueueInterviewer

__all__ = [
    "Answer",
    "AnswerValue",
    "AutoApproveInterviewer",
    "ConsoleInterviewer",
    "Interviewer",
    "Question",
    "QueueInterviewer",
]
