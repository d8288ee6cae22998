"""
CLI to append documents from a text file to the store.

Paragraphs (separated by blank lines) become documents. Each batch is
embedded with one provider call and persisted once.

Example:
    python -m scripts.load_documents --file notes.txt --batch-size 32 --source notes
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from tqdm import tqdm

from ragstore.config import settings, setup_logging
from ragstore.errors import RagStoreError
from ragstore.vector_store import get_vector_store


def split_paragraphs(text: str) -> List[str]:
    return [p.strip() for p in text.split("\n\n") if p.strip()]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load paragraphs of a text file into the document store.")
    parser.add_argument("--file", "-f", required=True, type=Path, help="UTF-8 text file")
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.embed_batch_size,
        help="Documents per embedding call and snapshot write.",
    )
    parser.add_argument("--source", default=None, help="Value stored as metadata['source'] (default: file name)")
    return parser.parse_args()


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    paragraphs = split_paragraphs(args.file.read_text(encoding="utf-8"))
    if not paragraphs:
        print(f"No paragraphs found in {args.file}")
        return

    source = args.source or args.file.name
    store = get_vector_store()
    loaded = 0

    for i in tqdm(range(0, len(paragraphs), args.batch_size), desc="Loading", unit="batch"):
        batch = paragraphs[i : i + args.batch_size]
        metadatas = [{"source": source, "paragraph": i + offset} for offset in range(len(batch))]
        try:
            store.add_documents(batch, metadatas)
        except RagStoreError:
            logger.exception("Load failed", extra={"offset": i, "loaded": loaded})
            sys.exit(1)
        loaded += len(batch)

    print(f"Loaded {loaded} documents (store now holds {len(store)})")


if __name__ == "__main__":
    main()
