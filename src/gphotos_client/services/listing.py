"""Cursor-driven listing of albums and media items."""

import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from gphotos_client.domain.errors import ParseError
from gphotos_client.domain.listing import Page, RawRow
from gphotos_client.domain.media import PHOTO, VIDEO, Album, MediaItem, Period
from gphotos_client.domain.protocol import (
    ALBUM_LIST_KEY,
    PHOTO_LIST_KEY,
    VIDEO_INFO_KEY,
    VIDEO_TYPE_SENTINEL,
)
from gphotos_client.domain.session import SessionContext
from gphotos_client.services.rpc import (
    RpcClient,
    decode_rpc_body,
    encode_list_request,
    extract_keyed,
)

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ListingKind(Generic[T]):
    """A listing RPC: its protocol key and how to decode one row."""

    name: str
    key: str
    decode_row: Callable[[object], T]


def decode_album_row(row: object) -> Album:
    """Decode an album listing row."""
    raw = RawRow.split(row)
    info = raw.metadata.get(ALBUM_LIST_KEY)
    if not raw.fields or not isinstance(info, list) or len(info) < 2:
        raise ParseError("Album row is missing its id or info block")
    period = None
    span = info[2] if len(info) > 2 else None
    if isinstance(span, list) and len(span) >= 2:
        period = Period(start=span[0], end=span[1])
    return Album(
        id=str(raw.fields[0]),
        title=info[1],
        period=period,
        item_count=info[3] if len(info) > 3 else None,
    )


def decode_media_row(row: object) -> MediaItem:
    """Decode a media listing row.

    ``row[1]`` holds the URL and photo dimensions followed by a type array
    whose first element marks videos. Video length and dimensions live in a
    separate keyed block at ``row[9]``.
    """
    if not isinstance(row, list) or len(row) < 6:
        raise ParseError(f"Media row is too short: {row!r}")
    media = RawRow.split(row[1], metadata_type=list)
    type_marker = media.metadata[0] if media.metadata else None
    length = None
    if type_marker == VIDEO_TYPE_SENTINEL:
        kind = VIDEO
        video_info = _video_info(row)
        length, width, height = video_info[0], video_info[2], video_info[3]
    else:
        kind = PHOTO
        width, height = media.field(1), media.field(2)
    return MediaItem(
        id=str(row[0]),
        type=kind,
        created_at=row[2],
        uploaded_at=row[5],
        width=width,
        height=height,
        length=length,
        raw_url=media.field(0),
    )


def _video_info(row: list[object]) -> list[object]:
    block = row[9] if len(row) > 9 else None
    info = block.get(VIDEO_INFO_KEY) if isinstance(block, dict) else None
    if not isinstance(info, list) or len(info) < 4:
        raise ParseError("Video row is missing its video info block")
    return info


ALBUMS: ListingKind[Album] = ListingKind("albums", ALBUM_LIST_KEY, decode_album_row)
PHOTOS: ListingKind[MediaItem] = ListingKind(
    "photos", PHOTO_LIST_KEY, decode_media_row
)


@dataclass
class PaginationEngine:
    """Fetches listing pages and drains them in arrival order."""

    rpc: RpcClient

    async def fetch_page(
        self,
        session: SessionContext,
        kind: ListingKind[T],
        cursor: str | None = None,
    ) -> Page[T]:
        """Fetch a single page starting at ``cursor``."""
        response = await self.rpc.data(session, encode_list_request(kind.key, cursor))
        if response.status_code != 200:
            _logger.warning(
                "Listing %s failed (status=%s); treating as end of data",
                kind.name,
                response.status_code,
            )
            return Page(items=[], next_cursor=None, failed=True)

        results = extract_keyed(decode_rpc_body(response.body), (0, 2), kind.key)
        if not isinstance(results, list) or not results:
            raise ParseError(f"Listing {kind.name} has no result block")
        rows = results[0] or []
        next_cursor = results[1] if len(results) > 1 else None
        return Page(
            items=[kind.decode_row(row) for row in rows],
            next_cursor=next_cursor or None,
        )

    async def iter_pages(
        self, session: SessionContext, kind: ListingKind[T]
    ) -> AsyncIterator[Page[T]]:
        """Yield pages until the server stops returning a cursor."""
        cursor = None
        while True:
            page = await self.fetch_page(session, kind, cursor)
            yield page
            if page.exhausted:
                return
            cursor = page.next_cursor

    async def fetch_all(self, session: SessionContext, kind: ListingKind[T]) -> list[T]:
        """Drain every page and concatenate the items."""
        items: list[T] = []
        async for page in self.iter_pages(session, kind):
            items.extend(page.items)
        return items

    async def fetch_latest(
        self, session: SessionContext, kind: ListingKind[T]
    ) -> T | None:
        """Return the first item of the first page, if any."""
        page = await self.fetch_page(session, kind)
        return page.items[0] if page.items else None
