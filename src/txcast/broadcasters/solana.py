"""Solana broadcaster: JSON-RPC ``sendTransaction``."""

from __future__ import annotations

import base64

from ..constants import SOLANA_SEND_OPTIONS
from ..exceptions import NetworkError
from ..types import Chain, ChainFamily
from ..utils import extract_error_message, sniff_solana_payload
from .base import Broadcaster


class SolanaBroadcaster(Broadcaster):
    """Submit base58 or base64 encoded transactions to a Solana RPC node.

    Resubmission is left to the node through ``maxRetries``.
    """

    family = ChainFamily.SOLANA

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        decoded = sniff_solana_payload(raw_tx)
        encoded = base64.b64encode(decoded.data).decode("ascii")
        client = self._rpc_client(self._config.solana_rpc_url)

        try:
            signature = client.call("sendTransaction", [encoded, dict(SOLANA_SEND_OPTIONS)])
        except NetworkError as exc:
            self._raise_if_duplicate(chain, extract_error_message(exc), cause=exc)
            raise

        if not isinstance(signature, str) or not signature:
            raise NetworkError(
                "Solana RPC returned no transaction signature",
                endpoint=client.url,
                details={"result": signature},
            )
        return signature
