# server/logging_setup.py

import logging
import sys
from pathlib import Path


class _ThirdPartyFilter(logging.Filter):
    """
    Keeps our own loggers at the configured level and only lets
    warnings and above through from libraries (uvicorn access logs,
    passlib backend notices, sqlalchemy).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("server") or record.name == "root":
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int = logging.INFO, log_file: str | Path | None = None) -> None:
    """
    Configure the root logger with a console handler and, when given,
    a file handler. Pre-existing handlers are removed so repeated calls
    (app factory reloads, tests) do not duplicate output.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    ch.addFilter(_ThirdPartyFilter())
    root.addHandler(ch)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_path), encoding="utf-8")
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
