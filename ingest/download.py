"""Download event-overview pages and turn them into events."""
from __future__ import annotations

import logging
import os
from typing import Optional
from urllib.parse import urlparse

import requests
from dotenv import load_dotenv

from ingest.schemas import Event
from scrapers.datumprikker_page import ParsePageError, parse_page

load_dotenv()

REQUEST_TIMEOUT = float(os.getenv("DATUMPRIKKER_TIMEOUT", "30"))
REQUEST_RETRIES = int(os.getenv("DATUMPRIKKER_RETRIES", "1"))
USER_AGENT = os.getenv("DATUMPRIKKER_USER_AGENT", "Mozilla/5.0")

logger = logging.getLogger(__name__)


class DownloadError(Exception):
    """Raised when an event could not be downloaded."""


class NetworkError(DownloadError):
    """The page could not be fetched."""


class PageParseError(DownloadError):
    """The page was fetched but could not be parsed."""

    def __init__(self, reason: ParsePageError):
        super().__init__(f"parse error of page: {reason}")
        self.reason = reason


def _is_retryable(exc: requests.RequestException) -> bool:
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    response = getattr(exc, "response", None)
    return response is not None and response.status_code >= 500


def fetch_page(
    url: str,
    *,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> str:
    """Return the body of ``url``.

    Connection errors, timeouts and 5xx responses are retried
    ``REQUEST_RETRIES`` times; any other failure is raised immediately.

    Raises:
        ValueError: ``url`` is not an http(s) URL.
        NetworkError: The request failed.
    """
    if urlparse(url).scheme not in ("http", "https"):
        raise ValueError(f"not an http(s) url: {url!r}")

    http = session or requests
    attempt = 0
    while True:
        attempt += 1
        logger.info("GET %s (attempt %d)", url, attempt)
        try:
            response = http.get(
                url,
                headers={"User-Agent": USER_AGENT},
                timeout=timeout if timeout is not None else REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            return response.text
        except requests.RequestException as exc:
            if attempt <= REQUEST_RETRIES and _is_retryable(exc):
                logger.warning("Fetching %s failed, retrying: %s", url, exc)
                continue
            raise NetworkError(f"network error during download: {exc}") from exc


def download_event(url: str, **kwargs) -> Event:
    """Fetch ``url`` and parse it as an event-overview page.

    Keyword arguments are passed on to :func:`fetch_page`.
    """
    text = fetch_page(url, **kwargs)
    try:
        event = parse_page(text)
    except ParsePageError as exc:
        logger.info("Could not parse %s: %s", url, exc)
        raise PageParseError(exc) from exc
    logger.info("Parsed event %r from %s", event.title, url)
    return event
