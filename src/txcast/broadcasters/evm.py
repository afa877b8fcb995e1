"""EVM broadcaster: ``eth_sendRawTransaction`` through web3."""

from __future__ import annotations

import logging
from collections.abc import Callable

from eth_typing import HexStr
from hexbytes import HexBytes
from web3 import Web3

from ..config import BroadcastConfig
from ..connections import HttpTransport, build_web3
from ..types import Chain, ChainFamily
from ..utils import ensure_hex_prefix, extract_error_message
from .base import Broadcaster

logger = logging.getLogger(__name__)

Web3Factory = Callable[..., Web3]


class EvmBroadcaster(Broadcaster):
    """Send raw transactions to the chain's JSON-RPC node."""

    family = ChainFamily.EVM
    duplicate_hint = (
        "The transaction hash cannot be recovered from this error; "
        "compute it from the raw transaction if needed"
    )

    def __init__(
        self,
        config: BroadcastConfig,
        transport: HttpTransport,
        *,
        web3_factory: Web3Factory | None = None,
    ) -> None:
        super().__init__(config, transport)
        self._web3_factory = web3_factory or build_web3

    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        rpc_url = self._config.rpc_url_for(chain)
        web3 = self._web3_factory(rpc_url, timeout=self._config.request_timeout)
        logger.debug("Sending raw EVM transaction to %s", rpc_url)

        try:
            tx_hash = web3.eth.send_raw_transaction(HexStr(ensure_hex_prefix(raw_tx)))
        except Exception as exc:
            self._raise_if_duplicate(chain, extract_error_message(exc), cause=exc)
            raise

        return HexBytes(tx_hash).to_0x_hex()
