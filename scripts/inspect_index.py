"""
Utility script to inspect stored documents without embeddings.

Usage:
    python -m scripts.inspect_index --limit 5 --offset 0
"""

from __future__ import annotations

import argparse
import json

from ragstore.vector_store import get_vector_store


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect stored documents.")
    parser.add_argument("--limit", type=int, default=5, help="Number of documents to show")
    parser.add_argument("--offset", type=int, default=0, help="Offset for pagination")
    args = parser.parse_args()

    # Reading needs no credentials; the OpenAI client is only built on first embed.
    store = get_vector_store()
    documents = store.documents
    page = documents[args.offset : args.offset + args.limit]

    print(f"Snapshot: {store.storage.path}")
    print(f"Total documents: {len(documents)} (dimension={store.dimension})")
    print(f"Showing {len(page)} documents (offset={args.offset}, limit={args.limit})")
    for idx, doc in enumerate(page, start=args.offset + 1):
        print(f"\n#{idx}: {doc.id}")
        print("Metadata:", json.dumps(doc.metadata or {}, ensure_ascii=False))
        snippet = doc.text[:400].replace("\n", " ")
        print("Text:", snippet + ("..." if len(doc.text) > 400 else ""))


if __name__ == "__main__":
    main()
