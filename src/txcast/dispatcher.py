"""Route raw transactions to the broadcaster of their chain family."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache

from .broadcasters import Broadcaster, Web3Factory, build_broadcasters
from .chains import coerce_chain, resolve_family
from .classifier import find_duplicate_marker
from .config import BroadcastConfig
from .connections import HttpTransport
from .exceptions import BroadcastFailed, ClassifiedError, UnsupportedChain
from .types import BroadcastRequest, Chain, ChainFamily
from .utils import extract_error_message

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """Broadcast pre-signed transactions to any supported chain.

    Example:
        >>> dispatcher = BroadcastDispatcher(BroadcastConfig.from_env())
        >>> dispatcher.broadcast_raw_tx(Chain.ETHEREUM, "0x02f8...")  # doctest: +SKIP
        '0x...'
    """

    def __init__(
        self,
        config: BroadcastConfig | None = None,
        *,
        transport: HttpTransport | None = None,
        broadcasters: Mapping[ChainFamily, Broadcaster] | None = None,
        web3_factory: Web3Factory | None = None,
    ) -> None:
        self._config = config or BroadcastConfig()
        self._transport = transport or HttpTransport(timeout=self._config.request_timeout)
        if broadcasters is None:
            broadcasters = build_broadcasters(
                self._config, self._transport, web3_factory=web3_factory
            )
        self._broadcasters = dict(broadcasters)

    @property
    def config(self) -> BroadcastConfig:
        return self._config

    @property
    def supported_families(self) -> list[ChainFamily]:
        return list(self._broadcasters)

    def broadcast_raw_tx(self, chain: Chain | str, raw_tx: str) -> str:
        """Submit a signed transaction and return its transaction id.

        Args:
            chain: Target chain, as a :class:`Chain` or its name
            raw_tx: Signed transaction in the encoding the chain family expects

        Returns:
            The network's transaction id (hash, signature or digest)

        Raises:
            UnsupportedChain: No broadcaster handles ``chain``
            BroadcastFailed: The submission was rejected or could not complete
        """
        family = resolve_family(chain)
        resolved = coerce_chain(chain)
        broadcaster = self._broadcasters.get(family)
        if broadcaster is None:
            raise UnsupportedChain(resolved.value, [f.value for f in self._broadcasters])

        logger.info("Broadcasting raw transaction on %s via %s", resolved.value, family.value)
        try:
            tx_id = broadcaster.broadcast(resolved, raw_tx)
        except ClassifiedError:
            raise
        except Exception as exc:
            error_text = extract_error_message(exc)
            marker = find_duplicate_marker(family, error_text, self._config.duplicate_markers)
            if marker is not None:
                logger.warning(
                    "Duplicate-submission marker %r matched on %s broadcast", marker, resolved.value
                )
            raise BroadcastFailed(
                f"Failed to broadcast raw transaction on {resolved.value}: {error_text}",
                chain=resolved.value,
                cause=exc,
                possibly_already_submitted=marker is not None,
                marker=marker,
                details={"family": family.value},
            ) from exc

        logger.info("Broadcast on %s accepted, transaction id %s", resolved.value, tx_id)
        return tx_id

    def dispatch(self, request: BroadcastRequest) -> str:
        return self.broadcast_raw_tx(request.chain, request.raw_tx)


@lru_cache(maxsize=1)
def _default_dispatcher() -> BroadcastDispatcher:
    return BroadcastDispatcher(BroadcastConfig.from_env())


def broadcast_raw_tx(
    chain: Chain | str,
    raw_tx: str,
    *,
    config: BroadcastConfig | None = None,
) -> str:
    """Broadcast ``raw_tx`` on ``chain`` using default or supplied configuration."""
    dispatcher = _default_dispatcher() if config is None else BroadcastDispatcher(config)
    return dispatcher.broadcast_raw_tx(chain, raw_tx)
