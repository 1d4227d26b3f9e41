"""
Remote stylesheet sources.
"""

from .fetcher import RemoteSourceFetcher, SourceFetchError, FetchErrorKind, UnexpectedStatusError

__all__ = [
    "RemoteSourceFetcher",
    "SourceFetchError",
    "FetchErrorKind",
    "UnexpectedStatusError",
]
