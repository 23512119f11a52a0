"""Album search, creation and membership changes."""

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from gphotos_client.domain.errors import ParseError
from gphotos_client.domain.media import Album
from gphotos_client.domain.protocol import ALBUM_CREATE_KEY, ALBUM_ITEM_REMOVE_KEY
from gphotos_client.domain.session import SessionContext
from gphotos_client.services.listing import ALBUMS, PHOTOS, PaginationEngine
from gphotos_client.services.rpc import (
    RpcClient,
    decode_rpc_body,
    encode_mutation,
    extract_keyed,
)

_logger = logging.getLogger(__name__)


@dataclass
class AlbumResolver:
    """Finds albums by name or id and creates empty ones on demand."""

    rpc: RpcClient
    pagination: PaginationEngine
    _album_locks: dict[str, asyncio.Lock] = field(default_factory=dict, repr=False)
    _lock_users: dict[str, int] = field(default_factory=dict, repr=False)

    async def search(self, session: SessionContext, name: object) -> Album | None:
        """Return the first album whose id or title equals ``name``.

        Pages are fetched one at a time and the scan stops at the first match.
        """
        wanted = str(name)
        async for page in self.pagination.iter_pages(session, ALBUMS):
            for album in page.items:
                if album.title == wanted or album.id == wanted:
                    return album
        _logger.info('Album "%s" is not found', wanted)
        return None

    async def create(self, session: SessionContext, name: object) -> Album | None:
        """Create an empty album titled ``name``.

        The create call requires a seed item, so the most recent item is used
        and removed again once the album exists.
        """
        title = str(name)
        latest = await self.pagination.fetch_latest(session, PHOTOS)
        if latest is None:
            _logger.error("Can't create album %r: the library is empty", title)
            return None

        query = encode_mutation(ALBUM_CREATE_KEY, [[latest.id], None, title])
        response = await self.rpc.mutate(session, query)
        if response.status_code != 200:
            _logger.error(
                'Failed to create album "%s" (status=%s)', title, response.status_code
            )
            return None

        result = extract_keyed(decode_rpc_body(response.body), (0, 1), ALBUM_CREATE_KEY)
        album_id, inserted_id = _parse_created(result)
        await self.remove_item(session, album_id, inserted_id)
        _logger.info("Album id is %s", album_id)
        return Album(id=album_id, title=title, item_count=0)

    async def resolve_or_create(
        self, session: SessionContext, name: object
    ) -> Album | None:
        """Return the album named ``name``, creating it only if none exists."""
        album = await self.search(session, name)
        if album is not None:
            return album
        return await self.create(session, name)

    async def add_items(
        self, session: SessionContext, album_id: str, item_ids: Sequence[str]
    ) -> bool:
        """Add existing items to an album."""
        async with self._serialized(album_id):
            query = encode_mutation(ALBUM_CREATE_KEY, [list(item_ids), album_id])
            response = await self.rpc.mutate(session, query)
        if response.status_code != 200:
            _logger.error(
                "Failed to add %s items to album %s (status=%s)",
                len(item_ids),
                album_id,
                response.status_code,
            )
            return False
        return True

    async def remove_item(
        self, session: SessionContext, album_id: str, item_id: str
    ) -> None:
        """Remove ``item_id`` from ``album_id``. Removing an absent item is a no-op."""
        async with self._serialized(album_id):
            query = encode_mutation(ALBUM_ITEM_REMOVE_KEY, [[item_id], []])
            response = await self.rpc.mutate(session, query)
        if response.status_code != 200:
            _logger.warning(
                "Failed to remove %s from album %s (status=%s)",
                item_id,
                album_id,
                response.status_code,
            )

    @asynccontextmanager
    async def _serialized(self, album_id: str) -> AsyncIterator[None]:
        """Hold the album's lock; the lock is dropped once no caller needs it."""
        lock = self._album_locks.setdefault(album_id, asyncio.Lock())
        self._lock_users[album_id] = self._lock_users.get(album_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[album_id] -= 1
            if not self._lock_users[album_id]:
                del self._lock_users[album_id]
                del self._album_locks[album_id]


def _parse_created(result: object) -> tuple[str, str]:
    """Return the new album id and the id of the item the server seeded it with."""
    try:
        album_id, inserted = result[0], result[1]
        return str(album_id), str(inserted[0])
    except (TypeError, IndexError, KeyError) as exc:
        raise ParseError(f"Unexpected album creation result: {result!r}") from exc
