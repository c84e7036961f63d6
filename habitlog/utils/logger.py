"""
RotatingFileHandler logger factory.
10MB max, 3 backups. Console output goes to stderr so CLI output stays clean.
"""
from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path

_FMT = logging.Formatter(
    fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)


def get_logger(name: str, log_dir: Path | None = None, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # already configured

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Console handler
    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(_FMT)
    logger.addHandler(ch)

    # File handler
    if log_dir is not None:
        attach_file_handler(logger, log_dir)

    logger.propagate = False
    return logger


def attach_file_handler(logger: logging.Logger, log_dir: Path) -> None:
    """Add the rotating file handler once; safe to call repeatedly."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    target = log_dir / f"{logger.name.replace('.', '_')}.log"
    for h in logger.handlers:
        if isinstance(h, logging.handlers.RotatingFileHandler) and Path(h.baseFilename) == target:
            return
    fh = logging.handlers.RotatingFileHandler(
        filename=target,
        maxBytes=10 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    fh.setFormatter(_FMT)
    logger.addHandler(fh)
