"""Error taxonomy shared by the deck, catalog, generator and session engine."""

from __future__ import annotations


class TarotError(RuntimeError):
    pass


class InvalidArgument(TarotError, ValueError):
    """Caller passed a malformed request (bad count, wrong-sized spread, None)."""


class NotFound(TarotError, LookupError):
    """Card identity outside the loaded catalog."""


class NotReady(TarotError):
    """Catalog or deck could not be brought to a usable state."""


class OperationFailed(TarotError):
    """A reading or deck operation failed even though its preconditions held."""
