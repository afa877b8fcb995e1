"""TON broadcaster: ``sendBocReturnHash``."""

from __future__ import annotations

from collections.abc import Mapping

from ..constants import TON_SEND_BOC_PATH
from ..exceptions import NetworkError
from ..types import Chain, ChainFamily
from ..utils import extract_error_message
from .base import Broadcaster


class TonBroadcaster(Broadcaster):
    family = ChainFamily.TON

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        url = f"{self._config.api_root.rstrip('/')}{TON_SEND_BOC_PATH}"

        try:
            body = self._transport.post_json(url, {"boc": raw_tx})
        except NetworkError as exc:
            self._raise_if_duplicate(chain, extract_error_message(exc), cause=exc)
            raise

        result = body.get("result") if isinstance(body, Mapping) else None
        if isinstance(result, Mapping) and result.get("hash"):
            return result["hash"]

        error_text = extract_error_message(body)
        failure = NetworkError(
            f"TON broadcast failed: {error_text}", endpoint=url, details={"response": body}
        )
        self._raise_if_duplicate(chain, error_text, cause=failure)
        raise failure
