from docsubmit.schemas.files import StagedFile, SubmissionRequest
from docsubmit.schemas.principal import Principal
from docsubmit.schemas.state import (
    ErrorState,
    IdleState,
    ProcessingState,
    SubmissionState,
    SuccessState,
)

__all__ = [
    "ErrorState",
    "IdleState",
    "Principal",
    "ProcessingState",
    "StagedFile",
    "SubmissionRequest",
    "SubmissionState",
    "SuccessState",
]
