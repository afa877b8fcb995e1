"""Chain catalogue: kinds, capability predicates and family resolution."""

from __future__ import annotations

from collections.abc import Callable

from .exceptions import UnsupportedChain
from .types import Chain, ChainFamily, ChainKind

EVM_CHAINS = frozenset(
    {
        Chain.ETHEREUM,
        Chain.ARBITRUM,
        Chain.AVALANCHE,
        Chain.BASE,
        Chain.BLAST,
        Chain.BSC,
        Chain.CRONOS_CHAIN,
        Chain.OPTIMISM,
        Chain.POLYGON,
        Chain.ZKSYNC,
        Chain.MANTLE,
        Chain.HYPERLIQUID,
        Chain.SEI,
    }
)

UTXO_CHAINS = frozenset(
    {
        Chain.BITCOIN,
        Chain.BITCOIN_CASH,
        Chain.LITECOIN,
        Chain.DOGECOIN,
        Chain.DASH,
        Chain.ZCASH,
        Chain.CARDANO,
    }
)

COSMOS_CHAINS = frozenset(
    {
        Chain.THORCHAIN,
        Chain.MAYACHAIN,
        Chain.COSMOS,
        Chain.OSMOSIS,
        Chain.DYDX,
        Chain.KUJIRA,
        Chain.TERRA,
        Chain.TERRA_CLASSIC,
        Chain.NOBLE,
        Chain.AKASH,
    }
)

_CHAINS_BY_KIND = {
    ChainKind.EVM: EVM_CHAINS,
    ChainKind.UTXO: UTXO_CHAINS,
    ChainKind.COSMOS: COSMOS_CHAINS,
}


def chain_kind(chain: Chain) -> ChainKind:
    """Return the kind a chain belongs to."""
    for kind, chains in _CHAINS_BY_KIND.items():
        if chain in chains:
            return kind
    return ChainKind.OTHER


def is_chain_of_kind(chain: Chain, kind: ChainKind | str) -> bool:
    return chain_kind(chain) == ChainKind(kind)


def _is_chain(expected: Chain) -> Callable[[Chain], bool]:
    return lambda chain: chain == expected


# Evaluated in order; the first predicate that accepts a chain wins.
FAMILY_PREDICATES: tuple[tuple[ChainFamily, Callable[[Chain], bool]], ...] = (
    (ChainFamily.EVM, lambda chain: is_chain_of_kind(chain, ChainKind.EVM)),
    (ChainFamily.UTXO, lambda chain: is_chain_of_kind(chain, ChainKind.UTXO)),
    (ChainFamily.SOLANA, _is_chain(Chain.SOLANA)),
    (ChainFamily.COSMOS, lambda chain: is_chain_of_kind(chain, ChainKind.COSMOS)),
    (ChainFamily.TON, _is_chain(Chain.TON)),
    (ChainFamily.POLKADOT, _is_chain(Chain.POLKADOT)),
    (ChainFamily.RIPPLE, _is_chain(Chain.RIPPLE)),
    (ChainFamily.SUI, _is_chain(Chain.SUI)),
    (ChainFamily.TRON, _is_chain(Chain.TRON)),
)


def supported_family_names() -> list[str]:
    return [family.value for family, _ in FAMILY_PREDICATES]


def coerce_chain(chain: Chain | str) -> Chain:
    """Convert a chain name into a :class:`Chain`, raising ``UnsupportedChain`` if unknown."""
    if isinstance(chain, Chain):
        return chain
    try:
        return Chain(chain)
    except ValueError:
        raise UnsupportedChain(str(chain), supported_family_names()) from None


def resolve_family(chain: Chain | str) -> ChainFamily:
    """Map a chain to the family whose broadcaster handles it."""
    resolved = coerce_chain(chain)
    for family, predicate in FAMILY_PREDICATES:
        if predicate(resolved):
            return family
    raise UnsupportedChain(resolved.value, supported_family_names())
