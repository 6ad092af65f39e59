"""Exception hierarchy for staging, identity and submission failures."""


class DocSubmitError(Exception):
    """Base class for all docsubmit errors."""


class StagingError(DocSubmitError):
    pass


class IndexOutOfRange(StagingError):
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Index {index} out of range for {size} staged file(s)")


class SubmissionError(DocSubmitError):
    """The external submission endpoint rejected or failed the request."""


class OrchestratorStateError(DocSubmitError):
    """An edit or event is not allowed in the current submission state."""


class IdentityError(DocSubmitError):
    pass
