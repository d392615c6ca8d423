"""Client utilities for the Supabase REST (PostgREST) API."""

import logging
from typing import Any, Dict, List, Optional

import requests

from src.core.config import Settings, get_settings

logger = logging.getLogger(__name__)
_SESSION = requests.Session()

NO_COORDS = "NO_COORDS"
SUPPLIER_COLUMNS = (
    "id_fornecedor",
    "nome",
    "cidade",
    "estado",
    "endereco_latitude",
    "endereco_longitude",
    "servicos",
)


class FetchError(RuntimeError):
    """Raised when the supplier query fails or returns an unusable payload."""


def build_query_params() -> List[tuple]:
    # endereco_latitude appears twice; PostgREST ANDs repeated filters.
    return [
        ("select", ",".join(SUPPLIER_COLUMNS)),
        ("endereco_latitude", "not.is.null"),
        ("endereco_latitude", f"neq.{NO_COORDS}"),
    ]


def _headers(api_key: str) -> Dict[str, str]:
    return {
        "apikey": api_key,
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
    }


def fetch_suppliers(settings: Optional[Settings] = None) -> List[Dict[str, Any]]:
    """Query the supplier view for rows that have coordinates.

    Returns the rows exactly as PostgREST sent them, in response order.
    """
    settings = settings or get_settings()
    url = f"{settings.supabase_url}/rest/v1/{settings.supplier_view}"
    logger.info("Fetching suppliers from view=%s", settings.supplier_view)

    try:
        response = _SESSION.get(
            url,
            params=build_query_params(),
            headers=_headers(settings.supabase_key),
            timeout=settings.request_timeout,
        )
    except requests.RequestException as exc:
        raise FetchError(f"Supabase request failed: {exc}") from exc

    if not (200 <= response.status_code < 300):
        detail = _error_detail(response)
        logger.error("Supabase query failed: status=%s detail=%s", response.status_code, detail)
        raise FetchError(f"Supabase returned status {response.status_code}: {detail}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise FetchError("Supabase returned a non-JSON body") from exc

    if not isinstance(payload, list):
        raise FetchError(f"Expected a list of rows, got {type(payload).__name__}")

    logger.info("Fetched %d supplier rows", len(payload))
    return payload


def _error_detail(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "")[:500]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)[:500]
