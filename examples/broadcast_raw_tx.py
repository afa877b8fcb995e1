"""Broadcast a pre-signed transaction with txcast.

This example demonstrates:
- Loading endpoint overrides from a .env file
- Broadcasting a raw transaction to any supported chain
- Branching on possibly_already_submitted before resending

Usage:
    python examples/broadcast_raw_tx.py Ethereum 0x02f8...
"""

import logging
import sys

from dotenv import load_dotenv

from txcast import BroadcastConfig, BroadcastDispatcher, BroadcastFailed, UnsupportedChain

load_dotenv()


def example_broadcast(chain: str, raw_tx: str) -> int:
    """Broadcast ``raw_tx`` on ``chain`` and report the outcome."""

    dispatcher = BroadcastDispatcher(BroadcastConfig.from_env(load_env_file=False))

    try:
        tx_id = dispatcher.broadcast_raw_tx(chain, raw_tx)
    except UnsupportedChain as exc:
        print(f"❌ {exc.message}")
        return 2
    except BroadcastFailed as exc:
        if exc.possibly_already_submitted:
            print("⚠️ The network may already hold this transaction; do not resend it.")
            print(f"   Matched marker: {exc.marker}")
        print(f"❌ Broadcast failed: {exc.message}")
        return 1

    print("✅ Broadcast successful!")
    print(f"   Transaction id: {tx_id}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(64)
    sys.exit(example_broadcast(sys.argv[1], sys.argv[2]))
