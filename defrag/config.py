"""Reassembly configuration."""

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_DELIMITER = ";"


class ReassemblyConfig(BaseModel):
    """Settings shared by the CLI, the pipeline stages and the server.

    Attributes:
        delimiter: Single character separating fragments within a record.
        allow_contained: Whether a fragment found anywhere inside another
            counts as a full-length overlap. When False only suffix/prefix
            matches are considered.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    delimiter: str = DEFAULT_DELIMITER
    allow_contained: bool = True

    @field_validator("delimiter")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError(f"delimiter must be a single character, got {value!r}")
        return value


DEFAULT_CONFIG = ReassemblyConfig()
