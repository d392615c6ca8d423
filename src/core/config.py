"""Application configuration helpers.

Supabase credentials are only read from the environment (or a local `.env`):
`SUPABASE_URL` points at the project and `SUPABASE_KEY` is the API key sent
with every request.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_VIEW = "view_fornecedores_servicos_ativos"
DEFAULT_OUTPUT_PATH = "docs/index.html"


class ConfigurationError(RuntimeError):
    """Raised when mandatory configuration is missing."""


@dataclass(frozen=True)
class Settings:
    supabase_url: str
    supabase_key: str
    supplier_view: str = DEFAULT_VIEW
    output_path: str = DEFAULT_OUTPUT_PATH
    request_timeout: float = 10.0
    preview_port: int = 8080


def _get_required_env(name: str) -> str:
    value = (os.getenv(name) or "").strip()
    if not value:
        raise ConfigurationError(f"{name} must be set in the environment to generate the supplier map.")
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load, validate and cache settings to avoid repeated env lookups."""
    load_dotenv()

    supabase_url = _get_required_env("SUPABASE_URL").rstrip("/")
    supabase_key = _get_required_env("SUPABASE_KEY")
    supplier_view = os.getenv("SUPPLIER_VIEW") or DEFAULT_VIEW
    output_path = os.getenv("MAP_OUTPUT_PATH") or DEFAULT_OUTPUT_PATH

    timeout_raw = os.getenv("SUPABASE_TIMEOUT", "10")
    try:
        request_timeout = float(timeout_raw)
    except ValueError as exc:
        raise ConfigurationError(f"SUPABASE_TIMEOUT must be numeric, got {timeout_raw!r}") from exc

    preview_port = int(os.getenv("PORT", "8080"))

    if supplier_view != DEFAULT_VIEW:
        logger.info("Using supplier view override: %s", supplier_view)

    return Settings(
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        supplier_view=supplier_view,
        output_path=output_path,
        request_timeout=request_timeout,
        preview_port=preview_port,
    )
