from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests

from core.config import ReportConfig
from core.errors import DataFetchError

logger = logging.getLogger(__name__)


def fetch_timeseries(cfg: ReportConfig) -> Dict[str, List[Dict[str, Any]]]:
    """
    Download the per-country JSON time series.

    Any network, HTTP or decoding problem is raised as DataFetchError so the
    caller can abort the run before anything is rendered.
    """
    url = cfg.data_url
    logger.info(f"Fetching time series from {url}")

    try:
        resp = requests.get(url, timeout=cfg.request_timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise DataFetchError(f"Could not download data: {e}", url=url) from e

    try:
        payload = resp.json()
    except ValueError as e:
        raise DataFetchError(f"Response is not valid JSON: {e}", url=url) from e

    if not isinstance(payload, dict):
        raise DataFetchError("Expected a mapping of country -> records.", url=url)

    logger.info(f"Fetched {len(payload)} countries")
    return payload
