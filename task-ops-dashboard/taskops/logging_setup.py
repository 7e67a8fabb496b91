from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "taskops"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _DashboardNoiseFilter(logging.Filter):
    """
    Keep the dashboard log readable:
    - allow every taskops record
    - let SQLAlchemy and Streamlit through only at WARNING+
    - anything else only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
            return True
        if name.startswith(("sqlalchemy", "streamlit")):
            return record.levelno >= logging.WARNING
        return record.levelno >= logging.ERROR


def _own_handlers(root: logging.Logger):
    return [h for h in root.handlers if getattr(h, "_taskops", False)]


def setup_logging(
    level: Union[int, str] = logging.INFO,
    *,
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure logging with:
    - Console handler on stderr
    - File handler (taskops.log) when log_dir is given

    Streamlit re-executes the page script on every interaction, so handlers
    from a previous call are swapped out instead of stacked. Handlers owned
    by anything else (Streamlit, pytest) are left alone.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in _own_handlers(root):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    noise = _DashboardNoiseFilter()

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(noise)
    ch._taskops = True
    root.addHandler(ch)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path / "taskops.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        fh.addFilter(noise)
        fh._taskops = True
        root.addHandler(fh)

    return logging.getLogger(LOGGER_NAME)
