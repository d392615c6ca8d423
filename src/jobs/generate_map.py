"""CLI job that fetches suppliers from Supabase and writes the map page."""

import argparse
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional

from src.core.config import ConfigurationError, Settings, get_settings
from src.core.output import write_page
from src.etl.render import render_page
from src.etl.transform import build_markers, parse_suppliers, raw_rows, service_names
from src.vendors.supabase_rest import FetchError, fetch_suppliers

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FETCH_ERROR = 1
EXIT_CONFIG_ERROR = 2


@dataclass(frozen=True)
class GenerationResult:
    rows_fetched: int
    markers_built: int
    services: List[str]
    output_path: Optional[Path] = None

    @property
    def skipped(self) -> int:
        return self.rows_fetched - self.markers_built


def generate_map(settings: Optional[Settings] = None, output_path: Optional[str] = None) -> GenerationResult:
    """Full pipeline: fetch rows, build markers, render the page and write it.

    Nothing is written when the view returns no rows.
    """
    settings = settings or get_settings()
    target = output_path or settings.output_path

    rows = fetch_suppliers(settings)
    if not rows:
        logger.info("No suppliers with coordinates.")
        return GenerationResult(rows_fetched=0, markers_built=0, services=[])

    try:
        records = parse_suppliers(rows)
    except ValueError as exc:
        raise FetchError(f"Supabase returned a malformed supplier row: {exc}") from exc

    markers = build_markers(records)
    services = service_names(records)
    skipped = len(records) - len(markers)
    if skipped:
        logger.info("Skipped %d suppliers with unparsable coordinates.", skipped)
    logger.info("Built %d markers, %d distinct services", len(markers), len(services))

    html = render_page(raw_rows(records))
    written = write_page(html, target)

    return GenerationResult(
        rows_fetched=len(records),
        markers_built=len(markers),
        services=services,
        output_path=written,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate the static supplier map page")
    parser.add_argument("--output", dest="output", help="Output HTML path (default: MAP_OUTPUT_PATH or docs/index.html)")
    parser.add_argument("--view", dest="view", help="Supabase view to read suppliers from")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    try:
        settings = get_settings()
        if args.view:
            settings = replace(settings, supplier_view=args.view)
        result = generate_map(settings, output_path=args.output)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR
    except FetchError as exc:
        logger.error("Supplier fetch failed: %s", exc)
        return EXIT_FETCH_ERROR

    if result.output_path is not None:
        logger.info("Map generated: %s", result.output_path)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
