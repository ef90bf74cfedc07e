import logging
import sys
from typing import Optional

import httpx

from . import bencoding
from .values import Value

DEFAULT_TIMEOUT = 10.0


class SourceError(Exception):
    pass


def _is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def _fetch(url: str, client: httpx.Client) -> bytes:
    try:
        res = client.get(url, follow_redirects=True)
        res.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise SourceError(f"{url}: HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise SourceError(f"{url}: {e}") from e

    logging.debug(f"fetched {len(res.content)} bytes from {url}")
    return res.content


def read_source(
    location: str,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """
    Raw bytes from a file path, an http(s) URL or "-" for stdin.
    """
    if location == "-":
        data = sys.stdin.buffer.read()
        logging.debug(f"read {len(data)} bytes from stdin")
        return data

    if _is_url(location):
        if client is not None:
            return _fetch(location, client)
        with httpx.Client(timeout=timeout) as client:
            return _fetch(location, client)

    try:
        with open(location, "rb") as f:
            data = f.read()
    except OSError as e:
        raise SourceError(f"can't read {location}: {e.strerror}") from e

    logging.debug(f"read {len(data)} bytes from {location}")
    return data


def load(
    location: str, strict: bool = True, client: Optional[httpx.Client] = None
) -> Value:
    return bencoding.loads(read_source(location, client), strict=strict)


def save(value: Value, path: str) -> None:
    with open(path, "wb") as f:
        bencoding.encode(value, f)
    logging.debug(f"saved {path}")
