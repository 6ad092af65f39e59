"""Submission state variants. Exactly one is current; transitions replace it."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from docsubmit.models.enums import ProcessingPhase
from docsubmit.schemas.files import StagedFile, SubmissionRequest


class _FrozenState(BaseModel):
    model_config = ConfigDict(frozen=True)


class IdleState(_FrozenState):
    status: Literal["idle"] = "idle"
    files: tuple[StagedFile, ...] = ()
    jurisdiction: str | None = None
    contact_email: str = ""


class ProcessingState(_FrozenState):
    status: Literal["processing"] = "processing"
    request: SubmissionRequest
    generation: int
    total_steps: int = Field(ge=1)
    steps_completed: int = Field(default=0, ge=0)
    phase: ProcessingPhase = ProcessingPhase.sending

    @property
    def fraction(self) -> float:
        return self.steps_completed / self.total_steps


class SuccessState(_FrozenState):
    status: Literal["success"] = "success"
    file_names: tuple[str, ...]
    jurisdiction: str
    contact_email: str
    steps_completed: int
    total_steps: int


class ErrorState(_FrozenState):
    status: Literal["error"] = "error"
    request: SubmissionRequest
    reason: str


SubmissionState = Annotated[
    IdleState | ProcessingState | SuccessState | ErrorState,
    Field(discriminator="status"),
]
