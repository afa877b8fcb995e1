"""UTXO broadcaster: Blockchair push-transaction API."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..exceptions import NetworkError
from ..types import Chain, ChainFamily
from ..utils import extract_error_message, strip_hex_prefix
from .base import Broadcaster

logger = logging.getLogger(__name__)


class UtxoBroadcaster(Broadcaster):
    """Push raw hex transactions for Bitcoin-family chains."""

    family = ChainFamily.UTXO

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        url = self._config.blockchair_url(chain)
        logger.debug("Pushing raw %s transaction to %s", chain.value, url)
        try:
            body = self._transport.post_json(url, {"data": strip_hex_prefix(raw_tx)})
        except NetworkError as exc:
            self._raise_if_duplicate(chain, extract_error_message(exc), cause=exc)
            raise

        # {"data": {"transaction_hash": ...}} or {"data": null, "context": {"error": ...}}
        data = body.get("data") if isinstance(body, Mapping) else None
        if isinstance(data, Mapping) and data.get("transaction_hash"):
            return data["transaction_hash"]

        context = body.get("context") if isinstance(body, Mapping) else None
        if isinstance(context, Mapping) and context.get("error"):
            error_text = extract_error_message(context["error"])
        else:
            error_text = extract_error_message(body)

        self._raise_if_duplicate(chain, error_text)
        raise NetworkError(
            f"Failed to broadcast transaction: {error_text}",
            endpoint=url,
            details={"response": body},
        )
