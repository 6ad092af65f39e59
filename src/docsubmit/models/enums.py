import enum


class SubmissionStatus(str, enum.Enum):
    idle = "idle"
    processing = "processing"
    success = "success"
    error = "error"


class ProcessingPhase(str, enum.Enum):
    sending = "sending"
    awaiting_result = "awaiting_result"
    completed = "completed"
    failed = "failed"


class LifecycleEventType(str, enum.Enum):
    entered_processing = "entered_processing"
    progressed = "progressed"
    succeeded = "succeeded"
    failed = "failed"
    reset = "reset"


class IdentityMode(str, enum.Enum):
    manual = "manual"
    authenticated = "authenticated"
