"""
Seed loader: the default assets and behavior catalog.

Usage
-----
    marketsim-seed              # wipe activos + comportamientos, then load defaults
    marketsim-seed --no-reset   # append defaults to whatever is there

The history table is never touched.
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from sqlalchemy.orm import Session

import marketsim.models  # noqa: F401
from marketsim.core.logging import configure_logging
from marketsim.db.base import Base, SessionLocal, engine
from marketsim.models.asset import Asset
from marketsim.models.behavior import Behavior
from marketsim.services.assets import add_asset
from marketsim.services.catalog import add_behavior
from marketsim.services.storage import storage_guard

logger = logging.getLogger(__name__)

DEFAULT_ASSETS = [
    "Bitcoin (BTC)", "Ethereum (ETH)", "Cardano (ADA)", "Solana (SOL)", "Ripple (XRP)",
    "Polkadot (DOT)", "Litecoin (LTC)", "Avalanche (AVAX)", "Polygon (MATIC)",
    "Dogecoin (DOGE)", "Shiba Inu (SHIB)", "Chainlink (LINK)", "Uniswap (UNI)",
    "Stellar (XLM)", "Cosmos (ATOM)", "Algorand (ALGO)", "VeChain (VET)",
    "Aave (AAVE)", "Filecoin (FIL)", "Internet Computer (ICP)",
]

DEFAULT_BEHAVIORS: dict[str, dict[str, dict]] = {
    "Bitcoin": {
        "Bitcoin (BTC)": {
            "Up": {"Ethereum (ETH)": "Up", "Cardano (ADA)": "Up", "Ripple (XRP)": "Down"},
            "Down": {"Ethereum (ETH)": "Down", "Dogecoin (DOGE)": "Down", "Shiba Inu (SHIB)": "Down"},
        },
    },
    "Ethereum": {
        "Ethereum (ETH)": {
            "Up": {"Polygon (MATIC)": "Up", "Avalanche (AVAX)": "Up", "Cardano (ADA)": "Up"},
            "Down": {"Polygon (MATIC)": "Down", "Solana (SOL)": "Down"},
        },
    },
    "Regulación": {
        "Bitcoin (BTC)": {
            "Up": {"Ripple (XRP)": "Up"},
            "Down": {"Bitcoin (BTC)": "Down", "Ethereum (ETH)": "Down", "Cardano (ADA)": "Down"},
        },
    },
    "Hackeo": {
        "Solana (SOL)": {
            "Up": {"Bitcoin (BTC)": "Down"},
            "Down": {"Solana (SOL)": "Down", "Ethereum (ETH)": "Down"},
        },
    },
    "ETF aprobado": {
        "Bitcoin (BTC)": {
            "Up": {"Bitcoin (BTC)": "Up", "Ethereum (ETH)": "Up"},
        },
    },
    "Halving": {
        "Bitcoin (BTC)": {
            "Up": {"Bitcoin (BTC)": "Up", "Aave (AAVE)": "Up"},
        },
    },
}


def load_seed(db: Session, reset: bool = True) -> tuple[int, int]:
    """Load the defaults. Returns (assets inserted, behaviors stored)."""
    if reset:
        with storage_guard(db, "seed_reset"):
            db.query(Asset).delete()
            db.query(Behavior).delete()
            db.commit()

    for nombre in DEFAULT_ASSETS:
        add_asset(db, nombre)
    for evento, datos in DEFAULT_BEHAVIORS.items():
        add_behavior(db, evento, datos)

    logger.info("Seeded %d assets and %d behaviors", len(DEFAULT_ASSETS), len(DEFAULT_BEHAVIORS))
    return len(DEFAULT_ASSETS), len(DEFAULT_BEHAVIORS)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load the default assets and behaviors.")
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="keep existing assets and behaviors instead of wiping them first",
    )
    args = parser.parse_args(argv)

    configure_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        load_seed(db, reset=not args.no_reset)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
