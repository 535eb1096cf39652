"""Page fetching with retries and standardized errors."""

import requests

from .logger import get_logger
from .retry import RetryError, exponential_backoff, should_retry_http_status

logger = get_logger()

FETCH_RETRIES = 3


class RetryableStatusError(requests.exceptions.HTTPError):
    """HTTP response whose status is worth retrying (408, 429, 5xx gateway errors)."""


def _log_retry(attempt: int, error: Exception, delay: float):
    logger.warning("Retrying page fetch", attempt=attempt, error=str(error), delay=delay)


@exponential_backoff(
    max_retries=FETCH_RETRIES,
    base_delay=1.0,
    exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, RetryableStatusError),
    on_retry=_log_retry,
)
def _fetch_with_retry(url: str, timeout: int):
    """Fetch URL with automatic retry on transient errors."""
    resp = requests.get(url, timeout=timeout)
    if should_retry_http_status(resp.status_code):
        raise RetryableStatusError(f"{resp.status_code} from {url}", response=resp)
    return resp


def fetch_page(url: str, timeout: int = 15) -> str:
    """Fetch a page's HTML.

    Raises:
        ValueError: On any HTTP error, timeout, or request failure
        RetryError: When transient failures outlast every retry
    """
    try:
        resp = _fetch_with_retry(url, timeout)
        resp.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "HTTPError"
        logger.record_error(f"HTTPError_{status}")
        if status == 404:
            logger.warning("Page not found", url=url, status=404)
            raise ValueError(f"Page not found (404): {url}")
        logger.error("Page request failed", url=url, status=status)
        raise ValueError(f"Page request failed ({status}): {url}")
    except requests.exceptions.Timeout:
        logger.record_error("Timeout")
        logger.warning("Page request timed out", url=url)
        raise ValueError("Page request timed out. Try again later.")
    except requests.exceptions.RequestException as e:
        logger.record_error("RequestException")
        logger.error("Page request error", url=url, error=str(e))
        raise ValueError(f"Page request error: {e}")
    except RetryError:
        logger.record_error("RetryExhausted")
        logger.error("Page fetch gave up after retries", url=url)
        raise

    logger.record_page_fetched()
    return resp.text
