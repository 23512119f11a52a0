"""High-level client combining login, listing, albums and uploads."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from gphotos_client.adapters.upload_source import FileSource, UploadSource
from gphotos_client.domain.errors import AuthenticationError
from gphotos_client.domain.listing import Page
from gphotos_client.domain.media import Album, MediaItem
from gphotos_client.domain.session import SessionContext
from gphotos_client.services.albums import AlbumResolver
from gphotos_client.services.auth import SessionManager
from gphotos_client.services.listing import ALBUMS, PHOTOS, PaginationEngine
from gphotos_client.services.upload import ProgressCallback, UploadNegotiator


async def _noop() -> None:
    return None


@dataclass
class GPhotosClient:
    """Authenticated Google Photos client.

    ``login`` must complete before any other call.
    """

    session_manager: SessionManager
    pagination: PaginationEngine
    albums: AlbumResolver
    uploader: UploadNegotiator
    username: str | None = None
    password: str | None = None
    upload_chunk_size: int = 256 * 1024
    close_resources: Callable[[], Awaitable[None]] = _noop
    session: SessionContext | None = None

    async def login(
        self, username: str | None = None, password: str | None = None
    ) -> SessionContext:
        """Log in with the given or configured credentials."""
        resolved_username = username or self.username
        resolved_password = password or self.password
        if not resolved_username or not resolved_password:
            raise AuthenticationError("Username and password are required")
        self.session = await self.session_manager.login(
            resolved_username, resolved_password
        )
        return self.session

    async def refresh_token(self) -> SessionContext:
        """Derive a new anti-forgery token for the current login."""
        self.session = await self.session_manager.refresh_token(self._require_session())
        return self.session

    async def fetch_album_page(self, cursor: str | None = None) -> Page[Album]:
        return await self.pagination.fetch_page(self._require_session(), ALBUMS, cursor)

    async def fetch_all_album_list(self) -> list[Album]:
        return await self.pagination.fetch_all(self._require_session(), ALBUMS)

    async def fetch_photo_page(self, cursor: str | None = None) -> Page[MediaItem]:
        return await self.pagination.fetch_page(self._require_session(), PHOTOS, cursor)

    async def fetch_all_photo_list(self) -> list[MediaItem]:
        return await self.pagination.fetch_all(self._require_session(), PHOTOS)

    async def search_album(self, name: object) -> Album | None:
        return await self.albums.search(self._require_session(), name)

    async def create_album(self, name: object) -> Album | None:
        return await self.albums.create(self._require_session(), name)

    async def fetch_album(self, name: object) -> Album | None:
        """Return the album named ``name``, creating it when it does not exist."""
        return await self.albums.resolve_or_create(self._require_session(), name)

    async def add_to_album(self, album: Album | str, items: list[MediaItem]) -> bool:
        album_id = album.id if isinstance(album, Album) else album
        return await self.albums.add_items(
            self._require_session(), album_id, [item.id for item in items]
        )

    async def upload(
        self,
        source: UploadSource,
        file_name: str,
        on_progress: ProgressCallback | None = None,
    ) -> MediaItem:
        return await self.uploader.upload(
            self._require_session(), source, file_name, on_progress
        )

    async def upload_file(
        self,
        path: str | Path,
        file_name: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> MediaItem:
        """Upload a local file, named after its basename unless given."""
        session = self._require_session()
        source = FileSource.open(path, chunk_size=self.upload_chunk_size)
        return await self.uploader.upload(
            session, source, file_name or source.name, on_progress
        )

    async def close(self) -> None:
        """Release HTTP resources."""
        await self.close_resources()

    async def __aenter__(self) -> "GPhotosClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _require_session(self) -> SessionContext:
        if self.session is None:
            raise AuthenticationError("Not logged in")
        return self.session
