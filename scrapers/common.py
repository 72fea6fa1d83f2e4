from __future__ import annotations

import logging
import socket
import time
import urllib.request
from datetime import datetime, timezone
from urllib.error import HTTPError, URLError

from source_config import PAGE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
READ_CHUNK_BYTES = 64 * 1024


class FetchError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchTimeoutError(FetchError):
    pass


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _is_timeout(err: BaseException) -> bool:
    if isinstance(err, (socket.timeout, TimeoutError)):
        return True
    if isinstance(err, URLError):
        reason = getattr(err, "reason", None)
        if isinstance(reason, (socket.timeout, TimeoutError)):
            return True
        if reason is not None and "timed out" in str(reason).lower():
            return True
    return False


def _socket_of(response):
    fp = getattr(response, "fp", None)
    raw = getattr(fp, "raw", None)
    return getattr(raw, "_sock", None)


def fetch_bytes(
    url: str,
    timeout: float = PAGE_TIMEOUT_SECONDS,
    accept: str = "*/*",
    label: str = "URL",
) -> bytes:
    """GET ``url`` and return the body, failing once ``timeout`` seconds have elapsed.

    Each body read returns after a single ``recv`` and the socket timeout is
    shrunk to the time left before the deadline, so a server trickling bytes
    is cut off at the deadline rather than per byte.
    """
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": accept,
    }
    req = urllib.request.Request(url, headers=headers)
    deadline = time.monotonic() + timeout
    chunks: list[bytes] = []
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            sock = _socket_of(response)
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise FetchTimeoutError(f"Timed out after {timeout:g}s fetching {label}: {url}")
                if sock is not None:
                    sock.settimeout(max(remaining, 0.01))
                chunk = response.read1(READ_CHUNK_BYTES)
                if not chunk:
                    break
                chunks.append(chunk)
    except FetchError:
        raise
    except HTTPError as err:
        raise FetchError(f"Failed to fetch {label}: {err.code}", status_code=err.code) from err
    except Exception as err:
        if _is_timeout(err):
            raise FetchTimeoutError(f"Timed out after {timeout:g}s fetching {label}: {url}") from err
        raise FetchError(f"Failed to fetch {label}: {url}: {err}") from err
    body = b"".join(chunks)
    logger.debug("Fetched %s (%d bytes) from %s", label, len(body), url)
    return body


def fetch_url(url: str, timeout: float = PAGE_TIMEOUT_SECONDS, label: str = "page") -> str:
    data = fetch_bytes(url, timeout=timeout, accept=HTML_ACCEPT, label=label)
    return data.decode("utf-8", errors="ignore")
