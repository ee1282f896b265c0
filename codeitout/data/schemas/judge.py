from typing import Optional

from pydantic import BaseModel, ConfigDict

STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
STATUS_ACCEPTED = 3

PENDING_STATUSES = frozenset({STATUS_IN_QUEUE, STATUS_PROCESSING})


class SubmissionUnit(BaseModel):
    """One execution request for Judge0: a source run against a single stdin."""

    source_code: str
    language_id: int
    stdin: str = ""
    expected_output: Optional[str] = None


class JudgeStatus(BaseModel):
    id: int
    description: str = ""


class JudgeResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: str
    status: JudgeStatus
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    message: Optional[str] = None
    time: Optional[str] = None
    memory: Optional[float] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.id not in PENDING_STATUSES

    @property
    def is_accepted(self) -> bool:
        return self.status.id == STATUS_ACCEPTED
