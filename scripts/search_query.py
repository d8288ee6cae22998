"""
CLI to search the document store with a text query.

Example:
    python -m scripts.search_query --query "How does retrieval work?" --top-k 3
"""

from __future__ import annotations

import argparse

from ragstore.config import settings
from ragstore.vector_store import get_vector_store


def main() -> None:
    parser = argparse.ArgumentParser(description="Search stored documents by text query.")
    parser.add_argument("--query", "-q", required=True, help="Query text")
    parser.add_argument("--top-k", type=int, default=settings.default_top_k, help="Number of results")
    parser.add_argument("--snippet", type=int, default=300, help="Snippet length")
    args = parser.parse_args()

    store = get_vector_store()
    results = store.similarity_search_with_scores(args.query, k=args.top_k)

    if not results:
        print("No results")
        return

    for idx, (doc, score) in enumerate(results, start=1):
        snippet = doc.text[: args.snippet].replace("\n", " ")
        print(f"\n#{idx} score={score:.4f} id={doc.id}")
        print("metadata:", doc.metadata)
        print("text:", snippet + ("..." if len(doc.text) > args.snippet else ""))


if __name__ == "__main__":
    main()
