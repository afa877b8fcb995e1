"""Broadcaster interface shared by every chain family."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

from ..classifier import find_duplicate_marker
from ..config import BroadcastConfig
from ..connections import HttpTransport, JsonRpcClient
from ..exceptions import BroadcastFailed
from ..types import Chain, ChainFamily

logger = logging.getLogger(__name__)


class Broadcaster(ABC):
    """Submit a pre-signed transaction for one chain family."""

    family: ClassVar[ChainFamily]

    # Appended to the message of duplicate-submission failures.
    duplicate_hint: ClassVar[str] = ""

    def __init__(self, config: BroadcastConfig, transport: HttpTransport) -> None:
        self._config = config
        self._transport = transport

    @abstractmethod
    def broadcast(self, chain: Chain, raw_tx: str) -> str:
        """Submit ``raw_tx`` and return the network's transaction id."""

    def _rpc_client(self, url: str) -> JsonRpcClient:
        return JsonRpcClient(url, self._transport)

    def _raise_if_duplicate(
        self,
        chain: Chain,
        error_text: str,
        cause: BaseException | None = None,
    ) -> None:
        """Raise ``BroadcastFailed`` flagged as possibly submitted when ``error_text`` matches."""
        marker = find_duplicate_marker(self.family, error_text, self._config.duplicate_markers)
        if marker is None:
            return

        logger.warning(
            "Duplicate-submission marker %r matched on %s broadcast", marker, chain.value
        )
        message = f"Transaction may have already been submitted: {error_text}"
        if self.duplicate_hint:
            message = f"{message}. {self.duplicate_hint}"
        raise BroadcastFailed(
            message,
            chain=chain.value,
            cause=cause,
            possibly_already_submitted=True,
            marker=marker,
            details={"family": self.family.value, "error": error_text},
        )
