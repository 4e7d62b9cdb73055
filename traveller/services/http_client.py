"""Outbound HTTP with per-attempt deadlines and exponential-backoff retries.

``fetch_with_retry`` is the only network primitive the search core uses.
"""

import asyncio
import logging
import random
import string
import time
from typing import Any, Awaitable, Callable

import httpx

from traveller.errors import ProviderError, RateLimitError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 8.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_RETRY_AFTER = 30.0

_ERROR_BODY_LIMIT = 500


def _retry_after_seconds(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if not raw:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        # HTTP-date form is not worth parsing; fall back to backoff
        return None


def _body_excerpt(response: httpx.Response) -> str:
    try:
        return response.text[:_ERROR_BODY_LIMIT]
    except Exception:
        return ""


async def fetch_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_retry_after: float = DEFAULT_MAX_RETRY_AFTER,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> httpx.Response:
    """GET ``url`` and return the first non-retryable response.

    ``max_retries`` is the total number of attempts. 429, 5xx, transport
    errors and deadline overruns are retried; 2xx and other 4xx responses are
    returned as-is. Exhaustion raises ``RateLimitError`` when the last attempt
    was throttled and ``ProviderError`` otherwise.
    A Retry-After longer than ``max_retry_after`` seconds gives up at once
    with ``RateLimitError`` instead of holding the request open.
    """
    attempts = max(max_retries, 1)
    last_error: Exception | None = None

    for attempt in range(attempts):
        is_last = attempt == attempts - 1
        backoff = base_delay * (2 ** attempt)

        try:
            resp = await asyncio.wait_for(
                client.get(url, params=params, headers=headers),
                timeout=timeout,
            )
        except (httpx.TransportError, asyncio.TimeoutError) as e:
            last_error = e
            reason = "timed out" if isinstance(e, asyncio.TimeoutError) else str(e) or type(e).__name__
            logger.warning(f"GET {url} attempt {attempt + 1}/{attempts} failed: {reason}")
            if is_last:
                break
            await sleep(backoff)
            continue

        if resp.status_code == 429:
            retry_after = _retry_after_seconds(resp)
            if is_last:
                logger.error(f"GET {url} still rate limited after {attempts} attempts")
                raise RateLimitError(retry_after=retry_after)
            if retry_after is not None and retry_after > max_retry_after:
                logger.error(f"GET {url} asked to retry after {retry_after:.0f}s, over the {max_retry_after:.0f}s limit")
                raise RateLimitError(retry_after=retry_after)
            delay = retry_after if retry_after is not None else backoff
            logger.warning(f"GET {url} rate limited, retrying in {delay:.1f}s")
            await sleep(delay)
            continue

        if resp.status_code >= 500:
            if is_last:
                raise ProviderError(
                    f"Upstream error {resp.status_code} after {attempts} attempts",
                    details={"status": resp.status_code, "responseBody": _body_excerpt(resp)},
                )
            logger.warning(f"GET {url} returned {resp.status_code}, retrying in {backoff:.1f}s")
            await sleep(backoff)
            continue

        return resp

    if isinstance(last_error, asyncio.TimeoutError):
        message = f"no response within {timeout}s"
    elif last_error is not None:
        message = str(last_error) or type(last_error).__name__
    else:
        message = "Unknown error"
    raise ProviderError(
        f"Failed after {attempts} attempts: {message}",
        details={"originalError": type(last_error).__name__ if last_error else None},
    )


def generate_request_id() -> str:
    """Return a request id like ``req_1733050000000_k3j9x0a1b``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"req_{int(time.time() * 1000)}_{suffix}"
