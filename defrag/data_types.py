from typing import NamedTuple

from pydantic import BaseModel, ConfigDict


def snake_to_camel(snake_str: str) -> str:
    """Convert snake_case to camelCase."""
    components = snake_str.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


# Shared configuration for camelCase JSON serialization
CAMEL_CASE_CONFIG = ConfigDict(
    alias_generator=snake_to_camel,
    serialize_by_alias=True,
    populate_by_name=True,
)


class Protocol(BaseModel):
    """Base class for all protocol messages with camelCase JSON serialization."""

    model_config = CAMEL_CASE_CONFIG


# =============================================================================
# Client -> Server Messages
# =============================================================================


class FragmentRecord(Protocol):
    """One delimited record of text fragments sent by the client.

    Attributes:
        record: The fragments joined by the delimiter, e.g. "O draconia;conian devil!".
        sequence: Client-chosen position of the record in its input, echoed
            back on the matching ReassembledLine.
    """

    record: str
    sequence: int = 0


class ReassembleRequest(FragmentRecord):
    """Body of POST /reassemble.

    Extends FragmentRecord with optional per-request overrides of the
    server's reassembly configuration.
    """

    delimiter: str | None = None
    allow_contained: bool | None = None


# =============================================================================
# Server -> Client Messages
# =============================================================================


class ReassembledLine(Protocol):
    """Reconstructed text for one record.

    Attributes:
        text: The reassembled line.
        sequence: Sequence number copied from the FragmentRecord.
        fragment_count: Number of non-empty fragments the record split into.
        merge_count: Number of merges performed.
        complete: False when reassembly stopped early because the remaining
            fragments had no overlap; the text is then the longest leftover.
    """

    text: str
    sequence: int = 0
    fragment_count: int = 0
    merge_count: int = 0
    complete: bool = True


class ErrorResponse(Protocol):
    """Error response from server to client.

    Attributes:
        error: Human-readable error message.
        code: Machine-readable error code.
    """

    error: str
    code: str = "REASSEMBLY_ERROR"


# =============================================================================
# Core types
# =============================================================================


class OverlapCandidate(NamedTuple):
    """The last `length` characters of `prefix` equal the first `length` of `suffix`.

    The indices locate both fragments in the working set the candidate was
    enumerated from, so the loop can remove them by position.
    """

    prefix: str
    suffix: str
    length: int
    prefix_index: int
    suffix_index: int


class MergeStep(NamedTuple):
    prefix: str
    suffix: str
    length: int
    merged: str
    remaining: int
