"""
Smoke test for the retrieval context a chat turn would receive.

Example:
    python -m scripts.context_smoke --question "Can the chatbot read images?"
"""

from __future__ import annotations

import argparse
import logging

from ragstore.config import setup_logging
from ragstore.rag.bootstrap import RetrievalGate
from ragstore.rag.pipeline import DEFAULT_CONTEXT_TOP_K, ContextService
from ragstore.vector_store import get_vector_store


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Retrieval context smoke test.")
    parser.add_argument("--question", "-q", required=True, help="User message")
    parser.add_argument("--top-k", type=int, default=None, help="Override number of context documents")
    return parser.parse_args()


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    args = parse_args()

    gate = RetrievalGate(get_vector_store())
    service = ContextService(gate, top_k=args.top_k or DEFAULT_CONTEXT_TOP_K, logger_=logger)
    result = service.build_context([{"role": "user", "content": args.question}])

    print("\n=== Retrieval Context ===")
    print(f"retrieval: {gate.state.value}")
    print(f"query: {result.query}")
    print(f"documents: {len(result.documents)}")
    for idx, doc in enumerate(result.documents, start=1):
        print(f"  #{idx} {doc.id}: {doc.text[:120]}")
    print("\nSystem prompt:\n")
    print(result.system_prompt)


if __name__ == "__main__":
    main()
