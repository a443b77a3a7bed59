"""
Custom Exceptions

This module defines the exceptions raised at the link store boundary.
The controller catches every one of them where the request is issued and
converts it into an error kind, so none of them reach the presentation layer.

Benefits:
- One exception type per failure the user is told about
- The offending query, alias or target travels with the error
- Transport errors stay attached as original_error for logging
"""

from typing import Optional


class LinkStoreError(Exception):
    """Base exception for link store operations."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(message)


class SearchFailedError(LinkStoreError):
    """Raised when a search request fails in transport or on the server."""

    def __init__(self, query: str, reason: str = "Search failed", original_error: Optional[Exception] = None):
        self.query = query
        self.reason = reason
        super().__init__(f"{reason}: '{query}'", original_error=original_error)


class LinkNotFoundError(LinkStoreError):
    """Raised when an alias does not exist in the store."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"Alias '{alias}' not found")


class LinkLookupError(LinkStoreError):
    """Raised when an exact lookup fails for any reason other than a miss."""

    def __init__(self, alias: str, reason: str = "Lookup failed", original_error: Optional[Exception] = None):
        self.alias = alias
        self.reason = reason
        super().__init__(f"{reason}: '{alias}'", original_error=original_error)


class LinkCreateError(LinkStoreError):
    """Raised when a creation request fails in transport or on the server."""

    def __init__(self, target: str, reason: str = "Create failed", original_error: Optional[Exception] = None):
        self.target = target
        self.reason = reason
        super().__init__(f"{reason}: '{target}'", original_error=original_error)


class AliasConflictError(LinkCreateError):
    """Raised when the store reports an alias collision for a new link."""

    def __init__(self, target: str, alias: Optional[str] = None):
        self.alias = alias
        reason = f"Alias '{alias}' already taken" if alias else "Alias conflict"
        super().__init__(target, reason=reason)
