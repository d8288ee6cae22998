"""
CLI to seed an empty document store with the bootstrap corpus.

Example:
    python -m scripts.seed_store
    python -m scripts.seed_store --reset
"""

from __future__ import annotations

import argparse
import logging
import sys

from ragstore.config import setup_logging
from ragstore.errors import InitializationUnavailable, PersistenceError
from ragstore.rag.bootstrap import initialize_store
from ragstore.vector_store import get_vector_store


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the document store with the bootstrap corpus.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear the store before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    try:
        store = get_vector_store()
        if args.reset:
            store.clear()
        seeded = initialize_store(store)
    except (InitializationUnavailable, PersistenceError):
        logger.exception("Seeding failed")
        sys.exit(1)

    if seeded:
        print(f"Seeded store: {len(store)} documents")
    else:
        print(f"Store already holds {len(store)} documents, nothing to do")


if __name__ == "__main__":
    main()
