"""Polkadot broadcaster: ``author_submitExtrinsic``."""

from __future__ import annotations

from ..exceptions import JsonRpcError, NetworkError
from ..types import Chain, ChainFamily
from ..utils import ensure_hex_prefix, extract_error_message
from .base import Broadcaster


class PolkadotBroadcaster(Broadcaster):
    family = ChainFamily.POLKADOT

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        client = self._rpc_client(self._config.polkadot_rpc_url)

        try:
            result = client.call("author_submitExtrinsic", [ensure_hex_prefix(raw_tx)])
        except JsonRpcError as exc:
            error_text = extract_error_message(exc)
            self._raise_if_duplicate(chain, error_text, cause=exc)
            raise NetworkError(
                f"Polkadot broadcast failed: {error_text}",
                endpoint=client.url,
                details=exc.details,
            ) from exc

        if not isinstance(result, str) or not result:
            raise NetworkError(
                "Polkadot RPC returned no extrinsic hash",
                endpoint=client.url,
                details={"result": result},
            )
        return result
