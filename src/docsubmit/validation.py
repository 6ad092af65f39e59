"""Submission gating rules. Every predicate is total and never raises."""

import re
from collections.abc import Sequence

from docsubmit.jurisdictions import JurisdictionDirectory
from docsubmit.schemas.files import StagedFile
from docsubmit.schemas.principal import Principal

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str | None) -> bool:
    """Pragmatic address check, not RFC-complete."""
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.match(value.strip()) is not None


def is_jurisdiction_selected(
    value: str | None, directory: JurisdictionDirectory
) -> bool:
    return isinstance(value, str) and bool(value) and value in directory


def has_identity(identity: str | Principal | None) -> bool:
    if isinstance(identity, Principal):
        return bool(identity.email)
    return is_valid_email(identity)


def can_submit(
    files: Sequence[StagedFile],
    jurisdiction: str | None,
    identity: str | Principal | None,
    directory: JurisdictionDirectory,
) -> bool:
    return (
        len(files) > 0
        and is_jurisdiction_selected(jurisdiction, directory)
        and has_identity(identity)
    )


def validation_errors(
    files: Sequence[StagedFile],
    jurisdiction: str | None,
    identity: str | Principal | None,
    directory: JurisdictionDirectory,
) -> list[str]:
    """Human-readable reasons submission is blocked (empty = valid)."""
    errors: list[str] = []

    if not files:
        errors.append("Add at least one PDF document")

    if not isinstance(jurisdiction, str) or not jurisdiction:
        errors.append("Select a jurisdiction")
    elif jurisdiction not in directory:
        errors.append(f"Unknown jurisdiction: {jurisdiction}")

    if isinstance(identity, Principal):
        if not identity.email:
            errors.append("Signed-in account has no email address")
    elif not isinstance(identity, str):
        errors.append("Sign in to receive the analysis report")
    elif not identity.strip():
        errors.append("Enter an email address to receive the report")
    elif not is_valid_email(identity):
        errors.append("Enter a valid email address")

    return errors
