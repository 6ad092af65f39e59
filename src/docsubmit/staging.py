"""File staging: ordered, deduplicated, immutable sets of files to submit."""

import logging
import mimetypes
from collections.abc import Iterable, Sequence
from pathlib import Path

from docsubmit.exceptions import IndexOutOfRange
from docsubmit.schemas.files import StagedFile

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

StagedSet = tuple[StagedFile, ...]


def add_files(
    staged: Sequence[StagedFile],
    candidates: Iterable[StagedFile],
    accepted_media_type: str = PDF_MEDIA_TYPE,
) -> StagedSet:
    """Merge candidates after the staged files, keeping the first file seen per key.

    Candidates with any other media type are dropped without error.
    """
    accepted = []
    for candidate in candidates:
        if candidate.media_type != accepted_media_type:
            logger.debug(
                "Ignoring %s: media type %s is not %s",
                candidate.name, candidate.media_type, accepted_media_type,
            )
            continue
        accepted.append(candidate)

    seen: set[tuple[str, int]] = set()
    merged: list[StagedFile] = []
    for f in [*staged, *accepted]:
        if f.key in seen:
            continue
        seen.add(f.key)
        merged.append(f)
    return tuple(merged)


def remove_file(staged: Sequence[StagedFile], index: int) -> StagedSet:
    if index < 0 or index >= len(staged):
        raise IndexOutOfRange(index, len(staged))
    return tuple(f for i, f in enumerate(staged) if i != index)


def clear_files() -> StagedSet:
    return ()


def total_size(staged: Sequence[StagedFile]) -> int:
    return sum(f.size_bytes for f in staged)


def staged_file_from_path(path: str | Path, media_type: str | None = None) -> StagedFile:
    """Read a local file (e.g. a bundled demo document) into a StagedFile."""
    path = Path(path)
    content = path.read_bytes()
    mime = media_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return StagedFile(
        name=path.name,
        size_bytes=len(content),
        media_type=mime,
        content=content,
    )
