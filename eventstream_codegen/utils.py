"""Utility functions for loading Smithy JSON model documents.

This module provides functions for loading a model from files, URLs or
standard input with proper error handling and validation.
"""

import json
import sys
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class ModelLoaderError(Exception):
    """Custom exception for model loading errors."""

    pass


def _check_document(data: Any, source: str) -> dict:
    if not isinstance(data, dict) or not isinstance(data.get("shapes"), dict):
        logger.error(f"No 'shapes' object in model from {source}")
        raise ModelLoaderError(f"Not a Smithy JSON model (missing 'shapes'): {source}")
    return data


def load_model_from_file(file_path: str | Path) -> tuple[str, dict]:
    """Load a model document from a local file.

    Args:
        file_path: Path to the JSON model file.

    Returns:
        Tuple of (source description, parsed model document).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ModelLoaderError: If file cannot be read or is not a model document.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load model from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning(f"File does not have .json extension: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}", exc_info=True)
        raise ModelLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise ModelLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info(f"Loaded model from {file_path}")
    return str(file_path), _check_document(data, str(file_path))


def load_model_from_url(url: str, timeout: int = 30) -> tuple[str, dict]:
    """Load a model document from a URL.

    Args:
        url: URL to fetch the model from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed model document).

    Raises:
        ModelLoaderError: If URL is invalid, request fails, or response isn't a model.
    """
    logger.debug(f"Attempting to load model from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error(f"Invalid URL format: {url}")
        raise ModelLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning(f"URL {url} does not have JSON content type: {content_type}")

        data = response.json()

    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise ModelLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise ModelLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise ModelLoaderError(f"HTTP error {e.response.status_code} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}", exc_info=True)
        raise ModelLoaderError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        logger.error(f"Invalid JSON response from URL {url}: {e}", exc_info=True)
        raise ModelLoaderError(f"Invalid JSON response from URL {url}: {e}") from e

    logger.info(f"Loaded model from {url}")
    return url, _check_document(data, url)


def load_model_from_stream(stream: TextIO | None = None) -> tuple[str, dict]:
    """Load a model document from a text stream (standard input by default)."""
    stream = stream or sys.stdin
    try:
        data = json.load(stream)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON on standard input: {e}")
        raise ModelLoaderError(f"Invalid JSON on standard input: {e}") from e
    return "<stdin>", _check_document(data, "<stdin>")


def load_model(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, dict]:
    """Load a model document from either a file or URL.

    Args:
        file_path: Path to local JSON file (mutually exclusive with url).
        url: URL to fetch the model from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, parsed model document).

    Raises:
        ModelLoaderError: If neither or both parameters are provided, or loading fails.
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path and not url:
        logger.error("Neither file_path nor url provided")
        raise ModelLoaderError("Either file_path or url must be provided")

    if file_path and url:
        logger.error("Both file_path and url provided")
        raise ModelLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_model_from_file(file_path)
    return load_model_from_url(url, timeout)
