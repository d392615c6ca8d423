"""Persisting the generated map page."""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def write_page(content: str, path: Union[str, Path]) -> Path:
    """Write `content` to `path`, creating parent folders and replacing any previous page."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as fh:
        fh.write(content)
    logger.info("Wrote map page to %s (%d bytes)", target, len(content.encode("utf-8")))
    return target
