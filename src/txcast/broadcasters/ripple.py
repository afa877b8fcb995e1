"""Ripple broadcaster: rippled ``submit`` over JSON-RPC.

rippled does not follow JSON-RPC 2.0 error objects. Server errors come back
as ``{"result": {"status": "error", "error": ..., "error_message": ...}}`` and
engine rejections as a ``submit`` result whose ``engine_result`` was not
accepted (``tef*``, ``tem*``, ``tel*``).
"""

from __future__ import annotations

import itertools
from collections.abc import Mapping
from typing import NoReturn

from ..exceptions import NetworkError
from ..types import Chain, ChainFamily
from ..utils import extract_error_message, strip_hex_prefix
from .base import Broadcaster

_request_ids = itertools.count(1)


def _is_accepted(result: Mapping) -> bool:
    accepted = result.get("accepted")
    if accepted is not None:
        return bool(accepted)
    # Older servers omit "accepted"; fall back to the engine result prefix
    engine_result = str(result.get("engine_result") or "")
    return engine_result == "tesSUCCESS" or engine_result.startswith("ter")


class RippleBroadcaster(Broadcaster):
    family = ChainFamily.RIPPLE

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        url = self._config.ripple_rpc_url
        payload = {
            "method": "submit",
            "params": [{"tx_blob": strip_hex_prefix(raw_tx)}],
            "id": next(_request_ids),
        }

        try:
            body = self._transport.post_json(url, payload)
        except NetworkError as exc:
            self._raise_if_duplicate(chain, extract_error_message(exc), cause=exc)
            raise

        result = body.get("result") if isinstance(body, Mapping) else None
        if not isinstance(result, Mapping):
            raise NetworkError(
                "Malformed rippled submit response", endpoint=url, details={"response": body}
            )

        if result.get("status") == "error":
            error_text = str(result.get("error_message") or result.get("error") or "unknown error")
            self._fail(chain, url, error_text, result)

        if not _is_accepted(result):
            engine_result = result.get("engine_result") or "no engine_result"
            engine_message = result.get("engine_result_message")
            error_text = f"{engine_result}: {engine_message}" if engine_message else engine_result
            self._fail(chain, url, error_text, result)

        tx_json = result.get("tx_json")
        tx_hash = tx_json.get("hash") if isinstance(tx_json, Mapping) else None
        if not tx_hash:
            raise NetworkError(
                "rippled submit response carries no transaction hash",
                endpoint=url,
                details={"result": dict(result)},
            )
        return tx_hash

    def _fail(self, chain: Chain, url: str, error_text: str, result: Mapping) -> NoReturn:
        failure = NetworkError(
            f"Ripple submit failed: {error_text}", endpoint=url, details={"result": dict(result)}
        )
        self._raise_if_duplicate(chain, error_text, cause=failure)
        raise failure
