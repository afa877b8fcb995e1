"""Sui broadcaster: ``sui_executeTransactionBlock``."""

from __future__ import annotations

import json
from collections.abc import Mapping

from ..exceptions import BroadcastFailed, NetworkError
from ..types import Chain, ChainFamily
from ..utils import extract_error_message
from .base import Broadcaster

_MISSING_FIELDS = 'Sui broadcast requires JSON with "unsignedTx" and "signature" fields'


class SuiBroadcaster(Broadcaster):
    """Execute a signed transaction block on a Sui fullnode."""

    family = ChainFamily.SUI

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        try:
            payload = json.loads(raw_tx)
        except ValueError as exc:
            raise BroadcastFailed(_MISSING_FIELDS, chain=chain.value, cause=exc) from exc

        if not isinstance(payload, Mapping):
            raise BroadcastFailed(_MISSING_FIELDS, chain=chain.value)

        unsigned_tx = payload.get("unsignedTx")
        signature = payload.get("signature")
        if not unsigned_tx or not signature:
            missing = [name for name in ("unsignedTx", "signature") if not payload.get(name)]
            raise BroadcastFailed(_MISSING_FIELDS, chain=chain.value, details={"missing": missing})

        client = self._rpc_client(self._config.sui_rpc_url)
        try:
            result = client.call("sui_executeTransactionBlock", [unsigned_tx, [signature]])
        except NetworkError as exc:
            self._raise_if_duplicate(chain, extract_error_message(exc), cause=exc)
            raise

        digest = result.get("digest") if isinstance(result, Mapping) else None
        if not digest:
            raise NetworkError(
                "Sui fullnode returned no transaction digest",
                endpoint=client.url,
                details={"result": result},
            )
        return digest
