"""Staged file and submission request models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StagedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    size_bytes: int = Field(ge=0)
    media_type: str
    content: bytes = Field(default=b"", repr=False)

    @property
    def key(self) -> tuple[str, int]:
        """Deduplication identity: two files with the same key are the same file."""
        return (self.name, self.size_bytes)


class SubmissionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    files: tuple[StagedFile, ...]
    jurisdiction: str
    contact_email: str

    @field_validator("files")
    @classmethod
    def _at_least_one_file(cls, v: tuple[StagedFile, ...]) -> tuple[StagedFile, ...]:
        if not v:
            raise ValueError("A submission needs at least one file")
        return v

    @property
    def file_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.files)
