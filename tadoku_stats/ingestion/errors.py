"""Exceptions raised by the ingestion collaborators."""


class IngestionError(Exception):
    """Base exception for fetch and snapshot errors"""
    pass


class FetchError(IngestionError):
    """Raised when a page cannot be retrieved"""
    pass


class ParseError(IngestionError):
    """Raised when a page does not have the expected structure"""
    pass


class SnapshotError(IngestionError):
    """Raised when a snapshot cannot be written or read back"""
    pass
