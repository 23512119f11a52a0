"""Domain models for albums and media items."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

PHOTO = "photo"
VIDEO = "video"


def ms_to_datetime(value: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000, tz=UTC)


@dataclass(frozen=True)
class Period:
    """Time span covered by an album, in epoch milliseconds."""

    start: int
    end: int


@dataclass(frozen=True)
class Album:
    """Represents a server-side album."""

    id: str
    title: str
    period: Period | None = None
    item_count: int | None = None


@dataclass(frozen=True)
class MediaItem:
    """Represents a photo or video in the library.

    Timestamps are epoch milliseconds. ``length`` is only set for videos.
    """

    id: str
    type: str
    created_at: int | None
    uploaded_at: int | None
    width: int | None = None
    height: int | None = None
    length: int | None = None
    raw_url: str | None = None
    title: str | None = None
    upload_info: dict[str, object] = field(default_factory=dict, compare=False)

    @property
    def is_video(self) -> bool:
        return self.type.lower() == VIDEO

    @property
    def created_datetime(self) -> datetime | None:
        if self.created_at is None:
            return None
        return ms_to_datetime(self.created_at)
