from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

from .config_loader import ImportConfig

LOG_LEVEL_ENV = "CONTACT_IMPORT_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
DEFAULT_LEVEL = logging.WARNING


def _resolve_level(level_name: Optional[str]) -> int:
    """Numeric level for ``debug``, ``DEBUG`` or ``"10"``.

    Unrecognised names, such as a mistyped ``CONTACT_IMPORT_LOG_LEVEL``, fall
    back to ``WARNING``, the import default.
    """
    text = str(level_name or "").strip().upper()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text)
    return level if isinstance(level, int) else DEFAULT_LEVEL


def configure_logging(
    config: ImportConfig,
    level_override: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> int:
    """
    Set the root logger level and return it. First hit wins:

    1. ``CONTACT_IMPORT_LOG_LEVEL`` environment variable
    2. ``level_override`` (the ``--log-level`` flag)
    3. ``config.logging.level`` from the YAML config
    4. ``WARNING``

    At ``DEBUG`` each parser reports its candidate count; ``INFO`` adds
    validation drops, dedup merges and duplicate matches. Records go to
    stderr, leaving stdout to the JSON or table preview.
    """
    effective_level_name = (
        os.getenv(LOG_LEVEL_ENV) or level_override or config.logging.level or "WARNING"
    )
    level_value = _resolve_level(effective_level_name)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level_value)
    else:
        logging.basicConfig(level=level_value, format=LOG_FORMAT, stream=stream or sys.stderr)
    return level_value
