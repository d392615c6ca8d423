"""HTTP entrypoint to preview and regenerate the supplier map."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from flask import Flask, jsonify, send_file

from src.core.config import ConfigurationError, get_settings
from src.jobs.generate_map import generate_map
from src.vendors.supabase_rest import FetchError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App & executor ----------
app = Flask(__name__)
# One worker so regenerations never overlap on the same output file.
_executor = ThreadPoolExecutor(max_workers=1)

# ---------- Routes ----------


@app.get("/healthz")
def healthcheck() -> Any:
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        return jsonify({"status": "misconfigured", "error": str(exc)}), 503
    return jsonify({"status": "ok", "output_path": settings.output_path}), 200


@app.get("/")
def index() -> Any:
    """Serve the last generated page."""
    try:
        settings = get_settings()
    except ConfigurationError as exc:
        return jsonify({"error": str(exc)}), 503

    page = Path(settings.output_path).resolve()
    if not page.is_file():
        return jsonify({"error": "map has not been generated yet"}), 404
    return send_file(page, mimetype="text/html")


@app.post("/generate")
def enqueue_generate() -> Any:
    try:
        get_settings()
    except ConfigurationError as exc:
        return jsonify({"error": str(exc)}), 503

    logger.info("Queueing map generation")
    _executor.submit(_run_job_safe)
    return jsonify({"data": {"status": "queued"}}), 202


# ---------- Internals ----------


def _run_job_safe() -> None:
    try:
        result = generate_map()
    except FetchError as exc:
        logger.error("Map generation failed: %s", exc)
        return
    logger.info(
        "Map generation finished: rows=%d markers=%d path=%s",
        result.rows_fetched,
        result.markers_built,
        result.output_path,
    )


def main() -> None:
    logger.info("[BOOT] ENV PORT=%s", os.getenv("PORT"))
    port = get_settings().preview_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
