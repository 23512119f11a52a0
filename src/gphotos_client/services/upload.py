"""Resumable upload handshake."""

import json
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from pydantic import ValidationError

from gphotos_client.adapters.transport import Transport, TransportResponse
from gphotos_client.adapters.upload_source import UploadSource
from gphotos_client.domain.errors import UploadError
from gphotos_client.domain.media import MediaItem
from gphotos_client.domain.protocol import (
    UPLOAD_FINALIZED_STATE,
    UPLOAD_INFO_KEY,
    UPLOAD_PROTOCOL_VERSION,
    UPLOAD_URL,
)
from gphotos_client.domain.session import SessionContext
from gphotos_client.domain.upload import CompletionInfo, SessionEnvelope, SessionStatus

_logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class UploadState(str, Enum):
    """Progress of a single upload."""

    INIT = "INIT"
    SESSION_REQUESTED = "SESSION_REQUESTED"
    CHUNK_SENT = "CHUNK_SENT"
    FINALIZED = "FINALIZED"
    FAILED = "FAILED"


def build_session_request(
    file_name: str, size: int, user_id: str, now: datetime | None = None
) -> dict[str, object]:
    """Build the session-creation request for one file."""
    timestamp = now or datetime.now(tz=UTC)
    inlined = {
        "auto_create_album": "camera_sync.active",
        "auto_downsize": "true",
        "storage_policy": "use_manual_setting",
        "disable_asbe_notification": "true",
        "client": "photosweb",
        "effective_id": user_id,
        "owner_name": user_id,
        "timestamp_ms": str(int(timestamp.timestamp() * 1000)),
    }
    fields: list[dict[str, object]] = [
        {
            "external": {
                "name": "file",
                "filename": file_name,
                "put": {},
                "size": size,
            }
        }
    ]
    fields.extend(
        {"inlined": {"name": name, "content": content, "contentType": "text/plain"}}
        for name, content in inlined.items()
    )
    return {
        "protocolVersion": UPLOAD_PROTOCOL_VERSION,
        "createSessionRequest": {"fields": fields},
    }


@dataclass
class UploadNegotiator:
    """Runs session creation, byte transfer and finalization for one file.

    ``last_state`` records where the most recent upload ended.
    """

    transport: Transport
    timeout: float = 600.0
    last_state: UploadState = UploadState.INIT

    async def upload(
        self,
        session: SessionContext,
        source: UploadSource,
        file_name: str,
        on_progress: ProgressCallback | None = None,
    ) -> MediaItem:
        """Upload ``source`` as ``file_name`` and return the created item."""
        self.last_state = UploadState.INIT
        try:
            request = build_session_request(file_name, source.size, session.user_id)
            response = await self.transport.send(
                "POST",
                UPLOAD_URL,
                content=json.dumps(request),
                headers={
                    "Content-Type": "application/x-www-form-urlencoded;charset=UTF-8"
                },
            )
            self.last_state = UploadState.SESSION_REQUESTED
            send_url = _transfer_url(_session_status(response))

            response = await self.transport.send(
                "POST",
                send_url,
                content=_counted(source, on_progress),
                headers={
                    "Content-Type": "application/octet-stream",
                    "Content-Length": str(source.size),
                    "X-HTTP-Method-Override": "PUT",
                },
                timeout=self.timeout,
            )
            self.last_state = UploadState.CHUNK_SENT
            status = _session_status(response)
            if status.state != UPLOAD_FINALIZED_STATE:
                _logger.error("Upload error: %s", status.state)
                raise UploadError(f"Upload error: {status.state}", state=status.state)
            item = _uploaded_item(status)
        except Exception:
            _logger.warning(
                "Upload of %s failed after %s", file_name, self.last_state.value
            )
            self.last_state = UploadState.FAILED
            raise

        self.last_state = UploadState.FINALIZED
        _logger.info("Uploaded %s successfully as %s", file_name, item.id)
        return item


def _session_status(response: TransportResponse) -> SessionStatus:
    """Validate a session response and return its status envelope."""
    if response.status_code != 200:
        _logger.error("Server error: %s", response.status_code)
        raise UploadError(f"Server error: {response.status_code}")
    try:
        envelope = SessionEnvelope.model_validate_json(response.body)
    except ValidationError as exc:
        raise UploadError(f"Malformed upload session response: {exc}") from exc
    if envelope.session_status is None:
        _logger.error("Server error: sessionStatus is not found")
        raise UploadError("Server error: sessionStatus is not found")
    return envelope.session_status


def _transfer_url(status: SessionStatus) -> str:
    if not status.external_field_transfers:
        raise UploadError("Upload session has no transfer URL", state=status.state)
    return status.external_field_transfers[0].put_info.url


async def _counted(
    source: UploadSource, on_progress: ProgressCallback | None
) -> AsyncIterator[bytes]:
    """Stream the source and enforce that it matches its declared size."""
    sent = 0
    async for chunk in source.chunks():
        sent += len(chunk)
        if sent > source.size:
            raise UploadError(
                f"Source produced more than the declared {source.size} bytes"
            )
        if on_progress is not None:
            on_progress(len(chunk))
        yield chunk
    if sent != source.size:
        raise UploadError(f"Source produced {sent} of {source.size} declared bytes")


def _uploaded_item(status: SessionStatus) -> MediaItem:
    """Build the uploaded item from the finalized session's completion info."""
    try:
        raw = status.additional_info[UPLOAD_INFO_KEY]["completionInfo"][
            "customerSpecificInfo"
        ]
        info = CompletionInfo.model_validate(raw)
    except (KeyError, TypeError, ValidationError) as exc:
        raise UploadError(
            "Finalized upload has no completion info", state=status.state
        ) from exc
    return MediaItem(
        id=info.photo_media_key,
        type=info.kind or "",
        created_at=info.timestamp * 1000 if info.timestamp is not None else None,
        # The server does not echo an upload time.
        uploaded_at=int(datetime.now(tz=UTC).timestamp() * 1000),
        raw_url=info.url,
        title=info.title,
        upload_info=dict(raw),
    )
