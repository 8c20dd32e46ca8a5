"""Fetch module."""

from godo.fetch.fetcher import (
    FetchError,
    ensure_scheme,
    fetch,
    fetch_all,
    run_fetch_all,
)

__all__ = [
    "FetchError",
    "ensure_scheme",
    "fetch",
    "fetch_all",
    "run_fetch_all",
]
