"""Exceptions raised by the deal insights service."""


class DealInsightsError(Exception):
    """Base class for service errors."""


class DealRetrievalError(DealInsightsError):
    """The deal source could not be read."""
