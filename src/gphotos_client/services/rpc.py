"""RPC request encoding and response decoding for the web UI endpoints."""

import json
from collections.abc import Sequence
from dataclasses import dataclass

from gphotos_client.adapters.transport import Transport, TransportResponse
from gphotos_client.domain.errors import ParseError
from gphotos_client.domain.protocol import (
    DATA_URL,
    MUTATE_URL,
    MUTATION_ACTION,
    MUTATION_ENVELOPE,
    RPC_PREFIX,
    RPC_PREFIX_LENGTH,
)
from gphotos_client.domain.session import SessionContext


def encode_list_request(key: str, cursor: str | None = None) -> list[object]:
    """Build the nested-array query for one page of a listing."""
    return [[[int(key), [{key: [cursor or None, None, None, None, 1]}], None, None, 1]]]


def encode_mutation(key: str, args: list[object]) -> list[object]:
    """Build the nested-array query for a mutation call."""
    return [MUTATION_ENVELOPE, [[MUTATION_ACTION, int(key), [{key: args}]]]]


def decode_rpc_body(body: str) -> object:
    """Strip the anti-XSSI prefix and parse the remaining JSON."""
    if len(body) < RPC_PREFIX_LENGTH or body[:RPC_PREFIX_LENGTH] != RPC_PREFIX:
        raise ParseError("RPC response is missing the expected prefix")
    try:
        return json.loads(body[RPC_PREFIX_LENGTH:])
    except json.JSONDecodeError as exc:
        raise ParseError(f"RPC response is not valid JSON: {exc}") from exc


def extract_keyed(payload: object, path: Sequence[int], key: str) -> object:
    """Follow ``path`` through nested arrays and return the value under ``key``."""
    node = payload
    for index in path:
        if not isinstance(node, list) or index >= len(node):
            raise ParseError(f"RPC response has no element at {list(path)}")
        node = node[index]
    if not isinstance(node, dict) or key not in node:
        raise ParseError(f"RPC response has no field {key}")
    return node[key]


@dataclass
class RpcClient:
    """Posts encoded queries to the data and mutate endpoints."""

    transport: Transport

    async def data(
        self, session: SessionContext, query: list[object]
    ) -> TransportResponse:
        """Send a read query to the data endpoint."""
        return await self._post(DATA_URL, session, query)

    async def mutate(
        self, session: SessionContext, query: list[object]
    ) -> TransportResponse:
        """Send a write query to the mutate endpoint."""
        return await self._post(MUTATE_URL, session, query)

    async def _post(
        self, url: str, session: SessionContext, query: list[object]
    ) -> TransportResponse:
        return await self.transport.send(
            "POST",
            url,
            form={
                "f.req": json.dumps(query, separators=(",", ":")),
                "at": session.token,
            },
        )
