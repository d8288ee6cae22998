"""
Error taxonomy shared by the document store and its callers.
"""

from __future__ import annotations


class RagStoreError(Exception):
    """Base class for every error raised by ragstore."""


class ProviderError(RagStoreError):
    """The embedding provider failed (quota, auth, network, missing credentials)."""


class PersistenceError(RagStoreError):
    """The persisted snapshot could not be read, parsed or written."""


class ValidationError(RagStoreError, ValueError):
    """Caller input or a provider response violates the store invariants."""


class InitializationUnavailable(RagStoreError):
    """The seed corpus could not be embedded, so retrieval cannot be bootstrapped."""


__all__ = [
    "RagStoreError",
    "ProviderError",
    "PersistenceError",
    "ValidationError",
    "InitializationUnavailable",
]
