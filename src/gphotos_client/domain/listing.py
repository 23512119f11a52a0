"""Domain models for paginated listings."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from gphotos_client.domain.errors import ParseError

T = TypeVar("T")


@dataclass(frozen=True)
class RawRow:
    """A listing row split into its leading fields and its trailing element."""

    fields: tuple[object, ...]
    metadata: object

    @classmethod
    def split(cls, row: object, metadata_type: type = dict) -> "RawRow":
        """Split a raw array whose last element is a ``metadata_type`` value."""
        if not isinstance(row, Sequence) or isinstance(row, str) or not row:
            raise ParseError(f"Listing row is not a non-empty array: {row!r}")
        metadata = row[-1]
        if not isinstance(metadata, metadata_type):
            raise ParseError(
                f"Listing row does not end with a {metadata_type.__name__}"
            )
        return cls(fields=tuple(row[:-1]), metadata=metadata)

    def field(self, index: int) -> object:
        """Return a leading field, or None when the row is shorter."""
        return self.fields[index] if index < len(self.fields) else None


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a listing.

    ``failed`` marks a page whose request was rejected by the server. Such a
    page is empty and has no cursor, so draining stops as if exhausted.
    """

    items: list[T]
    next_cursor: str | None = None
    failed: bool = False

    @property
    def exhausted(self) -> bool:
        return not self.next_cursor
