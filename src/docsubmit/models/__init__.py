from docsubmit.models.enums import (
    IdentityMode,
    LifecycleEventType,
    ProcessingPhase,
    SubmissionStatus,
)

__all__ = [
    "IdentityMode",
    "LifecycleEventType",
    "ProcessingPhase",
    "SubmissionStatus",
]
