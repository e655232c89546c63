"""
Network access for zigkit.

This module provides the two HTTP primitives the resolver needs:
- JSON lookups against release metadata services
- Streaming archive downloads with retry logic and exponential backoff

Timeouts are applied here; callers never configure them per request.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException, Timeout, ConnectionError, HTTPError

from zigkit.core.exceptions import FetchError

logger = logging.getLogger(__name__)

USER_AGENT = "zigkit"


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


def fetch_json(
    url: str,
    params: Optional[Dict[str, str]] = None,
    timeout: int = 30,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """
    Fetch a URL and decode its body as JSON.

    Args:
        url: URL to request
        params: Optional query parameters (URL-encoded by requests)
        timeout: Request timeout in seconds
        headers: Optional extra request headers

    Returns:
        Decoded JSON document

    Raises:
        FetchError: On transport error, non-2xx status, or invalid JSON
    """
    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)

    logger.debug(f"Fetching {url} params={params}")

    try:
        response = requests.get(
            url, params=params, headers=request_headers, timeout=timeout
        )
    except RequestException as e:
        raise FetchError(f"failed to fetch {url}: {e}") from e

    if not response.ok:
        # The select-version endpoint reports its failures as JSON bodies on
        # 4xx responses, so hand those back to the caller for a better message.
        if 400 <= response.status_code < 500:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and "message" in body:
                return body
        raise FetchError(f"failed to fetch {url}: HTTP {response.status_code}")

    try:
        return response.json()
    except ValueError as e:
        raise FetchError(f"failed to parse response from {url}: {e}") from e


def download_file(
    url: str,
    destination: Path,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination with retry logic.

    Args:
        url: URL to download from
        destination: Local path to save file
        timeout: Request timeout in seconds
        max_retries: Maximum number of retry attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries
        ValueError: If URL or destination is invalid

    Example:
        >>> url = "https://builds.zigtools.org/zls-x86_64-linux-0.14.0.tar.gz"
        >>> download_file(url, Path("cache/zls.tar.gz"))
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _download(url, destination, timeout)
        except (Timeout, ConnectionError, RequestException, HTTPError) as e:
            if isinstance(e, HTTPError) and _is_client_error(e):
                raise DownloadError(f"Download failed: {e}") from e
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError("Download failed for unknown reason")


def _is_client_error(error: HTTPError) -> bool:
    response = error.response
    return response is not None and 400 <= response.status_code < 500


def _download(url: str, destination: Path, timeout: int) -> Path:
    logger.info(f"Downloading from {url}")

    response = requests.get(
        url,
        headers={"User-Agent": USER_AGENT},
        stream=True,
        timeout=timeout,
        allow_redirects=True,
    )
    response.raise_for_status()

    downloaded = 0
    try:
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)
                    downloaded += len(chunk)
    except Exception as e:
        logger.error(f"Error during download: {e}")
        destination.unlink(missing_ok=True)
        raise

    logger.info(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


__all__ = ["DownloadError", "fetch_json", "download_file"]
