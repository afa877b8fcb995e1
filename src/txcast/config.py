"""Configuration container for the broadcast API."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .chains import COSMOS_CHAINS, EVM_CHAINS, coerce_chain
from .constants import (
    BLOCKCHAIR_CHAIN_NAMES,
    BLOCKCHAIR_PUSH_PATH,
    DEFAULT_API_ROOT,
    DEFAULT_COSMOS_RPC_URLS,
    DEFAULT_EVM_RPC_URLS,
    DEFAULT_POLKADOT_RPC_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RIPPLE_RPC_URL,
    DEFAULT_SOLANA_RPC_URL,
    DEFAULT_SUI_RPC_URL,
    DEFAULT_TRON_RPC_URL,
    DUPLICATE_SUBMISSION_MARKERS,
)
from .exceptions import UnsupportedChain, ValidationError
from .types import Chain, ChainFamily

logger = logging.getLogger(__name__)

ENV_PREFIX = "TXCAST_"


def _env_key(chain: Chain) -> str:
    return f"{ENV_PREFIX}RPC_URL_{chain.value.upper().replace('-', '_')}"


@dataclass(frozen=True)
class BroadcastConfig:
    """Endpoints, timeout and duplicate markers used by every broadcaster."""

    api_root: str = DEFAULT_API_ROOT
    evm_rpc_urls: Mapping[Chain, str] = field(default_factory=lambda: dict(DEFAULT_EVM_RPC_URLS))
    cosmos_rpc_urls: Mapping[Chain, str] = field(
        default_factory=lambda: dict(DEFAULT_COSMOS_RPC_URLS)
    )
    solana_rpc_url: str = DEFAULT_SOLANA_RPC_URL
    polkadot_rpc_url: str = DEFAULT_POLKADOT_RPC_URL
    ripple_rpc_url: str = DEFAULT_RIPPLE_RPC_URL
    sui_rpc_url: str = DEFAULT_SUI_RPC_URL
    tron_rpc_url: str = DEFAULT_TRON_RPC_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    duplicate_markers: Mapping[ChainFamily, tuple[str, ...]] = field(
        default_factory=lambda: dict(DUPLICATE_SUBMISSION_MARKERS)
    )

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise ValidationError(
                "Request timeout must be positive",
                field="request_timeout",
                value=self.request_timeout,
            )

    @classmethod
    def from_env(cls, *, load_env_file: bool = True) -> BroadcastConfig:
        """Build a configuration from ``TXCAST_*`` environment variables.

        Unset variables keep their defaults. A ``.env`` file in the working
        directory is loaded first unless ``load_env_file`` is False.
        """
        if load_env_file:
            load_dotenv()

        timeout_raw = os.getenv(f"{ENV_PREFIX}REQUEST_TIMEOUT")
        if timeout_raw is None:
            timeout = DEFAULT_REQUEST_TIMEOUT
        else:
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise ValidationError(
                    "Invalid request timeout",
                    field=f"{ENV_PREFIX}REQUEST_TIMEOUT",
                    value=timeout_raw,
                ) from exc

        evm_urls = dict(DEFAULT_EVM_RPC_URLS)
        cosmos_urls = dict(DEFAULT_COSMOS_RPC_URLS)
        for chain in EVM_CHAINS | COSMOS_CHAINS:
            override = os.getenv(_env_key(chain))
            if not override:
                continue
            target = evm_urls if chain in EVM_CHAINS else cosmos_urls
            target[chain] = override.rstrip("/")
            logger.debug("Using %s RPC override from environment", chain.value)

        def url(name: str, default: str) -> str:
            return os.getenv(f"{ENV_PREFIX}{name}", default).rstrip("/")

        return cls(
            api_root=url("API_ROOT", DEFAULT_API_ROOT),
            evm_rpc_urls=evm_urls,
            cosmos_rpc_urls=cosmos_urls,
            solana_rpc_url=url("SOLANA_RPC_URL", DEFAULT_SOLANA_RPC_URL),
            polkadot_rpc_url=url("POLKADOT_RPC_URL", DEFAULT_POLKADOT_RPC_URL),
            ripple_rpc_url=url("RIPPLE_RPC_URL", DEFAULT_RIPPLE_RPC_URL),
            sui_rpc_url=url("SUI_RPC_URL", DEFAULT_SUI_RPC_URL),
            tron_rpc_url=url("TRON_RPC_URL", DEFAULT_TRON_RPC_URL),
            request_timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Endpoint resolution
    # ------------------------------------------------------------------
    def rpc_url_for(self, chain: Chain | str) -> str:
        """Return the RPC endpoint configured for an EVM or Cosmos chain."""
        resolved = coerce_chain(chain)
        url = self.evm_rpc_urls.get(resolved) or self.cosmos_rpc_urls.get(resolved)
        if not url:
            raise UnsupportedChain(
                resolved.value, message=f"No RPC endpoint configured for chain: {resolved.value}"
            )
        return url.rstrip("/")

    def blockchair_url(self, chain: Chain | str) -> str:
        """Return the push-transaction URL for a UTXO chain."""
        resolved = coerce_chain(chain)
        name = BLOCKCHAIR_CHAIN_NAMES.get(resolved)
        if name is None:
            raise UnsupportedChain(
                resolved.value, message=f"No Blockchair mapping for chain: {resolved.value}"
            )
        return f"{self.api_root.rstrip('/')}/blockchair/{name}{BLOCKCHAIR_PUSH_PATH}"
