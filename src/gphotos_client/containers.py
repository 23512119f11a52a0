"""Dependency wiring for the client."""

from gphotos_client.adapters.script_evaluator import (
    PlaywrightScriptEvaluator,
    ScriptEvaluator,
)
from gphotos_client.adapters.transport import HttpxTransport
from gphotos_client.app_logging import configure_logging
from gphotos_client.client import GPhotosClient
from gphotos_client.config import Settings
from gphotos_client.services.albums import AlbumResolver
from gphotos_client.services.auth import SessionManager
from gphotos_client.services.listing import PaginationEngine
from gphotos_client.services.rpc import RpcClient
from gphotos_client.services.upload import UploadNegotiator


def build_client(
    settings: Settings | None = None,
    transport: HttpxTransport | None = None,
    evaluator: ScriptEvaluator | None = None,
) -> GPhotosClient:
    """Create a client with its own cookie jar and script sandbox."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    resolved_transport = transport or HttpxTransport.create(
        user_agent=resolved_settings.user_agent,
        timeout=resolved_settings.http_timeout,
    )
    resolved_evaluator = evaluator or PlaywrightScriptEvaluator(
        headless=resolved_settings.headless
    )
    rpc = RpcClient(resolved_transport)
    pagination = PaginationEngine(rpc)

    async def close_resources() -> None:
        await resolved_transport.close()

    return GPhotosClient(
        session_manager=SessionManager(resolved_transport, resolved_evaluator),
        pagination=pagination,
        albums=AlbumResolver(rpc=rpc, pagination=pagination),
        uploader=UploadNegotiator(
            resolved_transport, timeout=resolved_settings.upload_timeout
        ),
        username=resolved_settings.username,
        password=resolved_settings.password,
        upload_chunk_size=resolved_settings.upload_chunk_size,
        close_resources=close_resources,
    )
