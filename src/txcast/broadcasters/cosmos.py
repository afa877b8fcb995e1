"""Cosmos-SDK broadcaster: Tendermint RPC ``broadcast_tx_sync``."""

from __future__ import annotations

import base64
import logging
from collections.abc import Mapping

from ..exceptions import NetworkError
from ..types import Chain, ChainFamily
from ..utils import extract_error_message, sniff_cosmos_payload
from .base import Broadcaster

logger = logging.getLogger(__name__)


class CosmosBroadcaster(Broadcaster):
    """Broadcast protobuf transactions for any Cosmos SDK chain, THORChain included."""

    family = ChainFamily.COSMOS

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        decoded = sniff_cosmos_payload(raw_tx)
        rpc_url = self._config.rpc_url_for(chain)
        client = self._rpc_client(rpc_url)
        logger.debug(
            "Broadcasting %s transaction (%s) to %s", chain.value, decoded.format.value, rpc_url
        )

        tx = base64.b64encode(decoded.data).decode("ascii")
        try:
            result = client.call("broadcast_tx_sync", {"tx": tx})
        except NetworkError as exc:
            self._raise_if_duplicate(chain, extract_error_message(exc), cause=exc)
            raise

        if not isinstance(result, Mapping):
            raise NetworkError(
                "Malformed broadcast_tx_sync result", endpoint=rpc_url, details={"result": result}
            )

        code = int(result.get("code") or 0)
        if code != 0:
            error_text = (
                f"Broadcasting transaction failed with code {code} "
                f"(codespace: {result.get('codespace')}). Log: {result.get('log')}"
            )
            failure = NetworkError(error_text, endpoint=rpc_url, details={"result": dict(result)})
            self._raise_if_duplicate(chain, error_text, cause=failure)
            raise failure

        tx_hash = result.get("hash")
        if not tx_hash:
            raise NetworkError(
                "broadcast_tx_sync returned no transaction hash",
                endpoint=rpc_url,
                details={"result": dict(result)},
            )
        return tx_hash
