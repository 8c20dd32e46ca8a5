"""
URL fetching utilities.

fetch_all fans out one GET per URL and reports a summary line for each as it
completes. fetch issues GETs one at a time and streams each body to an output
stream, stopping at the first network error.
"""

import asyncio
import time
from typing import BinaryIO, Callable, Iterable, List, Optional, TextIO
import logging

import httpx

from godo.config import get_settings

logger = logging.getLogger(__name__)

KNOWN_SCHEMES = ("http://", "https://")

# Errors that mean a single URL could not be fetched
FETCH_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class FetchError(Exception):
    """A sequential fetch failed on a network or read error."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"fetch: {url}: {cause}")
        self.url = url
        self.cause = cause


def ensure_scheme(url: str, scheme: Optional[str] = None) -> str:
    """Prefix the default scheme to a URL that has none."""
    if url.lower().startswith(KNOWN_SCHEMES):
        return url
    if scheme is None:
        scheme = get_settings().default_scheme
    return scheme + url


# =============================================================================
# Concurrent fan-out
# =============================================================================

async def _summarize(client: httpx.AsyncClient, url: str) -> str:
    """GET a URL, count and discard its body, and describe the result."""
    start = time.perf_counter()
    try:
        async with client.stream("GET", url) as response:
            nbytes = 0
            async for chunk in response.aiter_bytes():
                nbytes += len(chunk)
    except FETCH_ERRORS as e:
        logger.debug(f"Fetching {url} failed: {e!r}")
        return f"while fetching {url}: {e}"

    secs = time.perf_counter() - start
    return f"{secs:.2f}s\t{nbytes:7d}\t{url}"


async def fetch_all(
    urls: Iterable[str],
    client: Optional[httpx.AsyncClient] = None,
    on_result: Optional[Callable[[str], None]] = None,
) -> List[str]:
    """
    Fetch every URL concurrently.

    Returns one line per URL in completion order, not input order. A failed
    URL yields an error line and never stops the others. The call returns
    only once every fetch has finished. There is no timeout and no retry.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=None, follow_redirects=True)

    try:
        tasks = [
            asyncio.create_task(_summarize(client, ensure_scheme(url)))
            for url in urls
        ]

        results: List[str] = []
        for next_done in asyncio.as_completed(tasks):
            line = await next_done
            results.append(line)
            if on_result is not None:
                on_result(line)
        return results

    finally:
        if owns_client:
            await client.aclose()


def run_fetch_all(
    urls: List[str],
    out: TextIO,
    client: Optional[httpx.AsyncClient] = None,
) -> List[str]:
    """Run fetch_all, printing each line as it arrives and the total time."""
    start = time.perf_counter()

    def emit(line: str) -> None:
        print(line, file=out, flush=True)

    results = asyncio.run(fetch_all(urls, client=client, on_result=emit))

    print(f"{time.perf_counter() - start:.2f}s elapsed", file=out)
    return results


# =============================================================================
# Sequential fetch
# =============================================================================

def fetch(
    urls: Iterable[str],
    out: BinaryIO,
    client: Optional[httpx.Client] = None,
) -> None:
    """
    GET each URL in turn and copy its body to out, followed by a status line.
    Raises FetchError on the first failure.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=None, follow_redirects=True)

    try:
        for url in urls:
            url = ensure_scheme(url)
            try:
                with client.stream("GET", url) as response:
                    for chunk in response.iter_bytes():
                        out.write(chunk)
                    status = f"{response.status_code} {response.reason_phrase}"
            except FETCH_ERRORS as e:
                raise FetchError(url, e) from e

            out.write(f"\nStatus: {status}\n".encode())
            out.flush()

    finally:
        if owns_client:
            client.close()
