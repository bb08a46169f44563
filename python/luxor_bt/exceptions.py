"""Exception types raised by the package."""

from __future__ import annotations


class DataFetchError(RuntimeError):
    """Price download failed or returned nothing. Fatal for a run."""


class InsufficientDataError(ValueError):
    """Fewer observations than an indicator window requires."""
