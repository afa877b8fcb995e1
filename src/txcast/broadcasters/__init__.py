"""Per-family broadcasters and their registry."""

from __future__ import annotations

from collections.abc import Mapping

from ..config import BroadcastConfig
from ..connections import HttpTransport
from ..types import ChainFamily
from .base import Broadcaster
from .cosmos import CosmosBroadcaster
from .evm import EvmBroadcaster, Web3Factory
from .polkadot import PolkadotBroadcaster
from .ripple import RippleBroadcaster
from .solana import SolanaBroadcaster
from .sui import SuiBroadcaster
from .ton import TonBroadcaster
from .tron import TronBroadcaster
from .utxo import UtxoBroadcaster

BROADCASTER_TYPES: Mapping[ChainFamily, type[Broadcaster]] = {
    ChainFamily.EVM: EvmBroadcaster,
    ChainFamily.UTXO: UtxoBroadcaster,
    ChainFamily.SOLANA: SolanaBroadcaster,
    ChainFamily.COSMOS: CosmosBroadcaster,
    ChainFamily.TON: TonBroadcaster,
    ChainFamily.POLKADOT: PolkadotBroadcaster,
    ChainFamily.RIPPLE: RippleBroadcaster,
    ChainFamily.SUI: SuiBroadcaster,
    ChainFamily.TRON: TronBroadcaster,
}


def build_broadcasters(
    config: BroadcastConfig,
    transport: HttpTransport,
    *,
    web3_factory: Web3Factory | None = None,
) -> dict[ChainFamily, Broadcaster]:
    """Instantiate one broadcaster per supported family."""
    broadcasters: dict[ChainFamily, Broadcaster] = {}
    for family, broadcaster_type in BROADCASTER_TYPES.items():
        if broadcaster_type is EvmBroadcaster:
            broadcasters[family] = EvmBroadcaster(config, transport, web3_factory=web3_factory)
        else:
            broadcasters[family] = broadcaster_type(config, transport)
    return broadcasters


__all__ = [
    "BROADCASTER_TYPES",
    "Broadcaster",
    "CosmosBroadcaster",
    "EvmBroadcaster",
    "PolkadotBroadcaster",
    "RippleBroadcaster",
    "SolanaBroadcaster",
    "SuiBroadcaster",
    "TonBroadcaster",
    "TronBroadcaster",
    "UtxoBroadcaster",
    "build_broadcasters",
]
