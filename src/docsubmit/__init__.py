"""Stage documents, gate on jurisdiction and identity, submit for analysis."""

from docsubmit.app import create_orchestrator
from docsubmit.orchestrator import SubmissionOrchestrator

__all__ = ["SubmissionOrchestrator", "create_orchestrator"]
