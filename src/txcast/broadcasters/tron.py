"""Tron broadcaster: ``/wallet/broadcasttransaction``."""

from __future__ import annotations

import json
import string
from collections.abc import Mapping

from ..constants import TRON_BROADCAST_PATH
from ..exceptions import BroadcastFailed, NetworkError, ValidationError
from ..types import Chain, ChainFamily
from ..utils import extract_error_message
from .base import Broadcaster


def decode_tron_message(message: str) -> str:
    """Decode the hex-encoded ``message`` Tron nodes attach to failures.

    Text that is not valid hex-encoded UTF-8 is returned unchanged.
    """
    if not message or len(message) % 2 or not all(c in string.hexdigits for c in message):
        return message
    try:
        return bytes.fromhex(message).decode("utf-8")
    except UnicodeDecodeError:
        return message


class TronBroadcaster(Broadcaster):
    family = ChainFamily.TRON

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        try:
            tx_json = json.loads(raw_tx)
        except ValueError as exc:
            raise ValidationError(
                "Tron transaction must be a JSON object", field="raw_tx"
            ) from exc

        url = f"{self._config.tron_rpc_url.rstrip('/')}{TRON_BROADCAST_PATH}"
        try:
            body = self._transport.post_json(url, tx_json)
        except NetworkError as exc:
            self._raise_if_duplicate(chain, extract_error_message(exc), cause=exc)
            raise
        if not isinstance(body, Mapping):
            raise NetworkError(
                "Malformed Tron broadcast response", endpoint=url, details={"response": body}
            )

        code = body.get("code")
        if code and code != "SUCCESS":
            message = decode_tron_message(str(body.get("message") or ""))
            error_text = f"{code}: {message}" if message else str(code)
            self._raise_if_duplicate(chain, error_text)
            raise NetworkError(
                f"Tron broadcast failed: {error_text}", endpoint=url, details={"response": body}
            )

        txid = body.get("txid")
        if not txid:
            raise BroadcastFailed(
                "Tron broadcast did not return transaction ID",
                chain=chain.value,
                details={"response": dict(body)},
            )
        return txid
