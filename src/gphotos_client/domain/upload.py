"""Pydantic models for resumable upload session payloads."""

from pydantic import BaseModel, ConfigDict, Field


class PutInfo(BaseModel):
    """Target of a single-use byte transfer."""

    url: str


class ExternalFieldTransfer(BaseModel):
    """Transfer slot for an external field of the session."""

    put_info: PutInfo = Field(alias="putInfo")


class CompletionInfo(BaseModel):
    """Metadata of the item created by a finalized upload."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    photo_media_key: str = Field(alias="photoMediaKey")
    timestamp: int | None = None
    kind: str | None = None
    title: str | None = None
    url: str | None = None


class SessionStatus(BaseModel):
    """Server view of an upload session."""

    model_config = ConfigDict(extra="allow")

    state: str | None = None
    external_field_transfers: list[ExternalFieldTransfer] = Field(
        default_factory=list, alias="externalFieldTransfers"
    )
    additional_info: dict[str, dict] = Field(
        default_factory=dict, alias="additionalInfo"
    )


class SessionEnvelope(BaseModel):
    """Body returned by session creation and byte transfer."""

    model_config = ConfigDict(extra="allow")

    session_status: SessionStatus | None = Field(default=None, alias="sessionStatus")
