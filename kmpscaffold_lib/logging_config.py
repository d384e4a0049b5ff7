"""
Logging setup for the kmpscaffold CLI.

Library modules log through ``logging.getLogger(__name__)``; the CLI calls
setup_logging() once. Level precedence: CLI flag > KMPSCAFFOLD_LOG_LEVEL > WARNING.
KMPSCAFFOLD_LOG_FILE adds a file handler that records everything at DEBUG.
"""
import logging
import sys
from typing import Optional

_FMT_CONSOLE = "%(message)s"
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s - %(message)s"


def _parse_level(level: Optional[str]) -> int:
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING


def setup_logging(level: Optional[str] = "WARNING", log_file: Optional[str] = None) -> None:
    numeric_level = _parse_level(level)
    # Plain messages unless progress logging was asked for
    fmt = _FMT_CONSOLE if numeric_level >= logging.WARNING else _FMT_DETAIL

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(numeric_level)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FMT_DETAIL))
        root.addHandler(fh)
        root.setLevel(logging.DEBUG)
